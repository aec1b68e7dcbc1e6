"""Tests for the delimited record parser."""

import logging

import pytest

from gd_audio_cache.api.records import parse_record, parse_record_list, split_ids


def join_record(mapping: dict[int, str], delimiter: str) -> str:
    return delimiter.join(f"{key}{delimiter}{value}" for key, value in mapping.items())


class TestParseRecord:
    """Test single record parsing."""

    @pytest.mark.parametrize("delimiter", [":", "~|~", ","])
    @pytest.mark.parametrize(
        "mapping",
        [
            {1: "128", 2: "Stereo Madness", 35: "1"},
            {0: "", 52: "10,20", 53: "30"},
            {999: "x"},
        ],
    )
    def test_round_trip(self, mapping: dict[int, str], delimiter: str) -> None:
        """Test that joined key/value pairs parse back to the same mapping."""
        if any(delimiter in value for value in mapping.values()):
            pytest.skip("value contains the delimiter")
        assert parse_record(join_record(mapping, delimiter), delimiter) == mapping

    @pytest.mark.parametrize("delimiter", [":", "~|~", ",", "|"])
    def test_no_data_sentinel_is_empty(self, delimiter: str) -> None:
        """Test that the server's -1 answer parses to an empty record."""
        assert parse_record("-1", delimiter) == {}

    def test_odd_length_drops_trailing_key(self, caplog) -> None:
        """Test that an unmatched trailing key is dropped and logged."""
        with caplog.at_level(logging.WARNING):
            record = parse_record("1:a:2:b:3", ":")
        assert record == {1: "a", 2: "b"}
        assert "divisible by two" in caplog.text

    def test_absent_keys_are_absent(self) -> None:
        """Test that sparse records only contain the keys given."""
        record = parse_record("1:a:35:7", ":")
        assert 52 not in record
        assert record.get(53) is None

    def test_non_numeric_key_is_skipped(self) -> None:
        """Test that a non-integer key does not break the rest of the record."""
        assert parse_record("1:a:foo:bar:2:b", ":") == {1: "a", 2: "b"}

    def test_song_info_delimiter(self) -> None:
        """Test parsing with the song info delimiter."""
        text = "1~|~803223~|~2~|~Supernova~|~10~|~https%3A%2F%2Fexample.com%2Fa.mp3"
        record = parse_record(text, "~|~")
        assert record[2] == "Supernova"
        assert record[10] == "https%3A%2F%2Fexample.com%2Fa.mp3"


class TestParseRecordList:
    """Test parsing of level listings."""

    def test_parses_first_section_only(self) -> None:
        """Test that only the records before the first # are parsed."""
        text = "1:100:2:First|1:101:2:Second#4:creator#9999:0:10"
        assert parse_record_list(text) == [
            {1: "100", 2: "First"},
            {1: "101", 2: "Second"},
        ]

    def test_empty_and_no_data(self) -> None:
        """Test that empty listings yield no records."""
        assert parse_record_list("") == []
        assert parse_record_list("-1") == []


class TestSplitIds:
    """Test comma-separated id lists."""

    def test_splits_ids(self) -> None:
        assert split_ids("10,20,30") == [10, 20, 30]

    def test_missing_or_empty(self) -> None:
        assert split_ids(None) == []
        assert split_ids("") == []

    def test_drops_garbage(self) -> None:
        """Test that empty, negative and non-numeric entries are dropped."""
        assert split_ids("10,,abc,-4, 20") == [10, 20]
