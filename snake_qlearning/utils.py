def unit(x):
    if x < 0:
        return -1
    if x > 0:
        return 1
    return 0


def rel_to_abs(cell, direction):
    return tuple(c + d for c, d in zip(cell, direction))
