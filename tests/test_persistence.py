import os
import pickle
import random
import pytest
from snake_qlearning.persistence import save_q_table, load_q_table, encode_q_table, decode_q_table, QTableFormatError
from snake_qlearning.qlearning import initialize_q_table, set_q_value, get_q_value
from snake_qlearning.snake_game import Direction
from snake_qlearning.state import State


def sample_table():
    Q = initialize_q_table()
    states = [
        State(1, 0, False, False, True, Direction.RIGHT),
        State(-1, -1, True, False, False, Direction.UP),
        State(0, 1, True, True, True, Direction.LEFT),
    ]
    for i, state in enumerate(states):
        for action in range(3):
            set_q_value(Q, state, action, (i + 1) * 0.1 * (action - 1) + 1e-9 * i)
    return Q


def backups(tmp_path):
    return [p for p in os.listdir(tmp_path) if ".corrupted_" in p]


def test_round_trip(tmp_path):
    path = str(tmp_path / "q_table.pkl")
    Q = sample_table()
    assert save_q_table(Q, path)
    loaded = load_q_table(path)
    assert set(loaded) == set(Q)
    for state in Q:
        assert list(loaded[state]) == list(Q[state])


def test_missing_file_is_cold_start(tmp_path):
    path = str(tmp_path / "q_table.pkl")
    assert load_q_table(path) == {}
    assert not os.path.exists(path)
    assert backups(tmp_path) == []


def test_corrupted_file_is_quarantined(tmp_path):
    path = tmp_path / "q_table.pkl"
    path.write_bytes(b"\x00\x01 definitely not a q-table")
    loaded = load_q_table(str(path))
    assert loaded == {}
    assert not path.exists()
    assert len(backups(tmp_path)) == 1
    assert backups(tmp_path)[0].startswith("q_table.pkl.corrupted_")


def test_truncated_file_is_quarantined(tmp_path):
    path = tmp_path / "q_table.pkl"
    assert save_q_table(sample_table(), str(path))
    data = path.read_bytes()
    path.write_bytes(data[: len(data) // 2])
    assert load_q_table(str(path)) == {}
    assert not path.exists()
    assert len(backups(tmp_path)) == 1


def test_wrong_version_is_quarantined(tmp_path):
    path = tmp_path / "q_table.pkl"
    data = encode_q_table(sample_table())
    data["version"] = 99
    path.write_bytes(pickle.dumps(data))
    assert load_q_table(str(path)) == {}
    assert len(backups(tmp_path)) == 1


def test_bad_entries_are_rejected_whole():
    data = encode_q_table(sample_table())
    data["states"].append(((0, 0, False, False, False, "NORTH"), [0.0, 0.0, 0.0]))
    with pytest.raises(QTableFormatError):
        decode_q_table(data)

    data = encode_q_table(sample_table())
    key, values = data["states"][0]
    data["states"][0] = (key, values[:2])
    with pytest.raises(QTableFormatError):
        decode_q_table(data)

    with pytest.raises(QTableFormatError):
        decode_q_table({"something": "else"})


def test_save_overwrites_and_leaves_no_temp_files(tmp_path):
    path = str(tmp_path / "q_table.pkl")
    Q = sample_table()
    assert save_q_table(Q, path)
    state = next(iter(Q))
    set_q_value(Q, state, 0, 42.0)
    assert save_q_table(Q, path)
    assert get_q_value(load_q_table(path), state, 0) == 42.0
    assert os.listdir(tmp_path) == ["q_table.pkl"]


def test_save_failure_is_reported_not_raised(tmp_path):
    path = str(tmp_path / "missing_dir" / "q_table.pkl")
    assert save_q_table(sample_table(), path) is False
    assert not os.path.exists(path)


def test_empty_table_round_trip(tmp_path):
    path = str(tmp_path / "q_table.pkl")
    assert save_q_table(initialize_q_table(), path)
    assert load_q_table(path) == {}
    assert backups(tmp_path) == []


def test_flipped_bytes_never_escape_the_loader(tmp_path):
    source = tmp_path / "source.pkl"
    assert save_q_table(sample_table(), str(source))
    original = source.read_bytes()
    rng = random.Random(11)

    for i in range(300):
        data = bytearray(original)
        for _ in range(rng.randint(1, 4)):
            data[rng.randrange(len(data))] = rng.randrange(256)
        folder = tmp_path / f"copy_{i}"
        folder.mkdir()
        path = folder / "q_table.pkl"
        path.write_bytes(bytes(data))

        loaded = load_q_table(str(path))

        if path.exists():
            # the flip happened to leave a valid table behind
            assert backups(folder) == []
        else:
            assert loaded == {}
            assert len(backups(folder)) == 1


def test_huge_size_field_is_quarantined(tmp_path):
    path = tmp_path / "q_table.pkl"
    # BINUNICODE8 claiming an enormous string length
    path.write_bytes(b"\x80\x04\x8d" + b"\xff" * 8)
    assert load_q_table(str(path)) == {}
    assert not path.exists()
    assert len(backups(tmp_path)) == 1


def test_file_referencing_classes_is_rejected(tmp_path):
    path = tmp_path / "q_table.pkl"
    Q = sample_table()
    data = encode_q_table(Q)
    data["states"].append((next(iter(Q)), [0.0, 0.0, 0.0]))
    path.write_bytes(pickle.dumps(data))
    assert load_q_table(str(path)) == {}
    assert not path.exists()
    assert len(backups(tmp_path)) == 1
