"""
Flat-file store tests
"""

import store


def test_missing_file_reads_empty(tmp_path):
    assert store.read_lines(tmp_path / "nope.dat") == []


def test_write_then_read_skips_blank_lines(tmp_path):
    path = tmp_path / "sub" / "records.dat"
    assert store.write_lines(path, ["a;b", "", "c;d"]) is True
    assert store.read_lines(path) == ["a;b", "c;d"]


def test_write_is_full_rewrite(tmp_path):
    path = tmp_path / "records.dat"
    store.write_lines(path, ["1", "2", "3"])
    store.write_lines(path, ["4"])
    assert store.read_lines(path) == ["4"]


def test_write_failure_is_reported_not_raised(tmp_path):
    # A directory cannot be opened for writing
    assert store.write_lines(tmp_path, ["x"]) is False


def test_unreadable_store_reads_empty(tmp_path):
    # A directory exists but cannot be read as a file
    assert store.read_lines(tmp_path) == []


def test_split_and_join_record():
    assert store.split_record(" 1 ; Bob ;x") == ["1", "Bob", "x"]
    assert store.join_record([1, "Bob", 2.5]) == "1;Bob;2.5"


class TestRates:
    def test_defaults_when_missing(self, tmp_path):
        assert store.load_rates(tmp_path / "paymentRates.dat") == (1000.0, 1600.0)

    def test_round_trip(self, tmp_path):
        path = tmp_path / "paymentRates.dat"
        store.save_rates(path, 900, 1500.5)
        assert store.read_lines(path) == ["900.0", "1500.5"]
        assert store.load_rates(path) == (900.0, 1500.5)

    def test_labelled_lines(self, tmp_path):
        path = tmp_path / "paymentRates.dat"
        path.write_text("Junior Rate: 1100.0\nSenior Rate: 1700.0\n", encoding="utf-8")
        assert store.load_rates(path) == (1100.0, 1700.0)

    def test_invalid_value_falls_back(self, tmp_path):
        path = tmp_path / "paymentRates.dat"
        path.write_text("cheap\n2000\n", encoding="utf-8")
        assert store.load_rates(path) == (1000.0, 2000.0)

    def test_non_finite_value_falls_back(self, tmp_path):
        path = tmp_path / "paymentRates.dat"
        path.write_text("inf\nnan\n", encoding="utf-8")
        assert store.load_rates(path) == (1000.0, 1600.0)
