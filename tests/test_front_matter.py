"""
Unit tests for front-matter parsing.

Tests cover:
- Splitting the YAML block from the body
- Case-insensitive keys
- Typed field readers (int, bool, list, date)
- Malformed front-matter
"""

from datetime import datetime

import pytest

from siteindex.front_matter import (
    FrontMatterError,
    get_bool,
    get_date,
    get_int,
    get_list,
    get_str,
    parse_front_matter,
    split_front_matter,
)


class TestParseFrontMatter:
    """Tests for parse_front_matter()"""

    def test_parses_mapping_and_body(self):
        text = '---\nlayout: post\ntitle: "Records"\nseriesOrder: 5\n---\n# Heading\nBody\n'
        metadata, body = parse_front_matter(text)
        assert metadata["layout"] == "post"
        assert metadata["title"] == "Records"
        assert metadata["seriesorder"] == 5
        assert body == "# Heading\nBody\n"

    def test_keys_are_lowercased(self):
        metadata, _ = parse_front_matter("---\nSeriesId: Types\nseriesIndexOrder: 2\n---\n")
        assert metadata == {"seriesid": "Types", "seriesindexorder": 2}

    def test_no_front_matter(self):
        """Documents without a leading --- have no metadata"""
        metadata, body = parse_front_matter("# Just markdown\n")
        assert metadata is None
        assert body == "# Just markdown\n"

    def test_empty_block(self):
        metadata, body = parse_front_matter("---\n---\nBody")
        assert metadata == {}
        assert body == "Body"

    def test_dots_close_block(self):
        metadata, body = parse_front_matter("---\ntitle: x\n...\nBody")
        assert metadata == {"title": "x"}
        assert body == "Body"

    def test_byte_order_mark_is_ignored(self):
        metadata, _ = parse_front_matter("\ufeff---\ntitle: x\n---\n")
        assert metadata == {"title": "x"}

    def test_horizontal_rule_later_in_body_is_kept(self):
        _, body = parse_front_matter("---\ntitle: x\n---\nabove\n---\nbelow\n")
        assert body == "above\n---\nbelow\n"


class TestMalformedFrontMatter:
    """Authoring errors raise FrontMatterError"""

    def test_unclosed_block(self):
        with pytest.raises(FrontMatterError, match="not closed"):
            parse_front_matter("---\ntitle: x\nBody", source="posts/x.md")

    def test_invalid_yaml(self):
        with pytest.raises(FrontMatterError, match="posts/x.md"):
            parse_front_matter("---\ntitle: [unclosed\n---\n", source="posts/x.md")

    def test_not_a_mapping(self):
        with pytest.raises(FrontMatterError, match="mapping"):
            parse_front_matter("---\n- a\n- b\n---\n")

    def test_error_is_value_error(self):
        assert issubclass(FrontMatterError, ValueError)


class TestFieldReaders:
    """Tests for the typed getters"""

    def test_get_str_default(self):
        assert get_str({}, "title") == ""
        assert get_str({"title": "  Hi  "}, "Title") == "Hi"
        assert get_str({"nav": 2020}, "nav") == "2020"

    def test_get_int(self):
        assert get_int({"seriesorder": 3}, "seriesOrder") == 3
        assert get_int({"seriesorder": "4"}, "seriesOrder") == 4
        assert get_int({}, "seriesOrder") == 0
        assert get_int({"seriesorder": ""}, "seriesOrder", default=7) == 7

    def test_get_int_rejects_text(self):
        with pytest.raises(FrontMatterError, match="seriesOrder"):
            get_int({"seriesorder": "third"}, "seriesOrder")

    def test_get_int_rejects_bool(self):
        with pytest.raises(FrontMatterError):
            get_int({"seriesorder": True}, "seriesOrder")

    def test_get_bool(self):
        assert get_bool({"draft": True}, "draft") is True
        assert get_bool({"draft": "true"}, "draft") is True
        assert get_bool({"draft": "false"}, "draft") is False
        assert get_bool({}, "draft") is False

    def test_get_list_from_yaml_list(self):
        assert get_list({"categories": ["Types", " Records "]}, "categories") == ["Types", "Records"]

    def test_get_list_from_string(self):
        """Comma-separated strings, with or without brackets and quotes"""
        assert get_list({"categories": "[a,  b]"}, "categories") == ["a", "b"]
        assert get_list({"categories": '[ "a",  "b"]'}, "categories") == ["a", "b"]
        assert get_list({"categories": "Types"}, "categories") == ["Types"]
        assert get_list({"categories": "[]"}, "categories") == []
        assert get_list({}, "categories") == []

    def test_get_date(self):
        metadata, _ = parse_front_matter("---\ndate: 2012-05-10\n---\n")
        assert get_date(metadata) == datetime(2012, 5, 10)
        assert get_date({"date": "2014-07-01T10:00:00"}) == datetime(2014, 7, 1)
        assert get_date({}) is None

    def test_get_date_invalid(self):
        with pytest.raises(FrontMatterError):
            get_date({"date": "yesterday"})
        with pytest.raises(FrontMatterError):
            get_date({"date": "2014-13-01"})


def test_split_returns_raw_header():
    header, body = split_front_matter("---\na: 1\nb: 2\n---\nrest")
    assert header == "a: 1\nb: 2\n"
    assert body == "rest"
