import pytest

import high_score_store


@pytest.fixture()
def store(tmp_path):
    return high_score_store.HighScoreStore(tmp_path / "nested" / "highscore.txt")


def test_missing_file_reads_zero(store):
    assert store.load() == 0


@pytest.mark.parametrize("raw_text", ["", "abc", "12.5", "-40"])
def test_corrupt_values_read_zero(store, raw_text):
    store.path.parent.mkdir(parents=True)
    store.path.write_text(raw_text, encoding="utf-8")
    assert store.load() == 0


def test_save_and_load(store):
    store.save(120)
    assert store.load() == 120
    assert store.path.read_text(encoding="utf-8") == "120"
    assert list(store.path.parent.glob(".highscore-*")) == []


def test_whitespace_is_tolerated(store):
    store.path.parent.mkdir(parents=True)
    store.path.write_text(" 75\n", encoding="utf-8")
    assert store.load() == 75


def test_record_if_higher(store):
    assert store.record_if_higher(30) is True
    assert store.load() == 30
    assert store.record_if_higher(30) is False
    assert store.record_if_higher(10) is False
    assert store.load() == 30
    assert store.record_if_higher(31) is True
    assert store.load() == 31


def test_default_path_lives_in_user_data_dir():
    path = high_score_store.default_high_score_path()
    assert path.name == high_score_store.HIGH_SCORE_FILE_NAME
