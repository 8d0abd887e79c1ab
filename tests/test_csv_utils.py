"""Tests for the delimited-text parser."""

import pytest

from review_processor.utils.csv_utils import normalize_header, parse_csv, read_csv_text


class TestParseCsv:
    """Tests for parse_csv."""

    def test_quoted_fields_and_escaped_quotes(self):
        text = (
            "reviews,sentiment,confidence_score\n"
            '"Great, ""awesome"" phone",positive,0.9\n'
            "Bad battery,negative,0.4\n"
        )
        assert parse_csv(text) == [
            {"reviews": 'Great, "awesome" phone', "sentiment": "positive", "confidence_score": "0.9"},
            {"reviews": "Bad battery", "sentiment": "negative", "confidence_score": "0.4"},
        ]

    def test_header_only_returns_no_records(self):
        assert parse_csv("reviews,sentiment,confidence_score\n") == []
        assert parse_csv("reviews,sentiment,confidence_score") == []

    def test_empty_input(self):
        assert parse_csv("") == []

    def test_crlf_line_endings(self):
        records = parse_csv("a,b\r\n1,2\r\n3,4\r\n")
        assert records == [{"a": "1", "b": "2"}, {"a": "3", "b": "4"}]

    def test_no_trailing_newline(self):
        assert parse_csv("a,b\n1,2") == [{"a": "1", "b": "2"}]

    def test_embedded_newline_inside_quotes(self):
        records = parse_csv('reviews,score\n"line one\nline two",1\n')
        assert records == [{"reviews": "line one\nline two", "score": "1"}]

    def test_carriage_return_kept_inside_quotes(self):
        records = parse_csv('a\n"x\r\ny"\n')
        assert records == [{"a": "x\r\ny"}]

    def test_short_rows_are_padded(self):
        assert parse_csv("a,b,c\n1\n") == [{"a": "1", "b": "", "c": ""}]

    def test_extra_columns_are_dropped(self):
        assert parse_csv("a,b\n1,2,3,4\n") == [{"a": "1", "b": "2"}]

    def test_duplicate_headers_keep_later_column(self):
        assert parse_csv("name,name\nfirst,second\n") == [{"name": "second"}]

    def test_headers_are_normalized(self):
        records = parse_csv("  Reviews ,Confidence   Score\tValue\nok,0.5\n")
        assert list(records[0]) == ["reviews", "confidence_score_value"]

    def test_unterminated_quote_is_accepted(self):
        records = parse_csv('a,b\n"never closed,1\n2\n')
        assert records == [{"a": "never closed,1\n2\n", "b": ""}]

    def test_quote_in_middle_of_field(self):
        # a quote opens quoted mode wherever it appears
        assert parse_csv('a\nab"c,d"e\n') == [{"a": "abc,de"}]


class TestNormalizeHeader:
    """Tests for normalize_header."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Reviews", "reviews"),
            ("  confidence score  ", "confidence_score"),
            ("Corrected \t Sentiment", "corrected_sentiment"),
            ("", ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_header(raw) == expected


class TestReadCsvText:
    """Tests for read_csv_text."""

    def test_reads_utf8(self, tmp_path):
        path = tmp_path / "reviews.csv"
        path.write_text("reviews\nTrès bien\n", encoding="utf-8")
        assert read_csv_text(path) == "reviews\nTrès bien\n"

    def test_falls_back_to_latin1(self, tmp_path):
        path = tmp_path / "reviews.csv"
        path.write_bytes("reviews\nTrès bien\n".encode("latin-1"))
        assert read_csv_text(path) == "reviews\nTrès bien\n"

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            read_csv_text(tmp_path / "missing.csv")
