"""Tests for tag surface formatting and tags-field serialization."""

import pytest

from vault_tagger.core.tag_formatting import (
    format_tag,
    parse_tags_field,
    serialize_tags,
    serialize_tags_field,
)


class TestFormatTag:
    """Test suite for format_tag."""

    @pytest.mark.parametrize(
        ("tag", "case_format", "expected"),
        [
            ("Machine Learning", "lowercase", "machine-learning"),
            ("machine learning", "uppercase", "MACHINE-LEARNING"),
            ("deep LEARNING", "titlecase", "Deep-Learning"),
            ("  spaced   out  ", "lowercase", "spaced-out"),
            ('"quoted" tag', "lowercase", "quoted-tag"),
            ("MiXeD", "retain", "MiXeD"),
            ("MiXeD", "unknown", "mixed"),
        ],
    )
    def test_formats(self, tag, case_format, expected):
        assert format_tag(tag, case_format) == expected

    def test_blank_tag_formats_to_empty(self):
        assert format_tag("   ") == ""
        assert format_tag('""') == ""

    def test_formatting_is_idempotent(self):
        for case_format in ("lowercase", "uppercase", "titlecase"):
            once = format_tag("Data  Science tools", case_format)
            assert format_tag(once, case_format) == once


class TestSerializeTags:
    """Test suite for serialize_tags and serialize_tags_field."""

    def test_one_item_per_line(self):
        assert serialize_tags(["Cat", "Big Dog"]) == "- cat\n- big-dog"

    def test_blank_tags_are_skipped(self):
        assert serialize_tags(["a", " ", "b"]) == "- a\n- b"

    @pytest.mark.parametrize(
        ("tag", "expected"),
        [
            ("null", "- 'null'"),
            ("true", "- 'true'"),
            ("42", "- '42'"),
            ("c++", "- c++"),
            ("key:value", "- 'key:value'"),
            ("-leading", "- '-leading'"),
            ("it's", "- it's"),
        ],
    )
    def test_quotes_only_when_yaml_would_misread(self, tag, expected):
        assert serialize_tags([tag], "retain") == expected

    def test_empty_field(self):
        assert serialize_tags_field([]) == "tags: []"

    def test_field(self):
        assert serialize_tags_field(["a", "b"]) == "tags:\n- a\n- b"


class TestParseTagsField:
    """Test suite for parse_tags_field across the three shapes."""

    def test_list_shape(self):
        assert parse_tags_field("tags:\n  - alpha\n  - 'beta'\n  - \"gamma\"") == ["alpha", "beta", "gamma"]

    def test_inline_shape(self):
        assert parse_tags_field("tags: [alpha, 'beta', \"gamma\"]") == ["alpha", "beta", "gamma"]

    def test_inline_shape_spanning_lines(self):
        assert parse_tags_field("tags: [alpha,\n  beta]") == ["alpha", "beta"]

    def test_unclosed_inline_shape_stops_at_next_key(self):
        assert parse_tags_field("tags: [alpha, beta\ntitle: Keep Me") == ["alpha", "beta"]

    def test_scalar_shape(self):
        assert parse_tags_field("tags: research") == ["research"]

    @pytest.mark.parametrize("value", ["null", "~", "Null", "NULL"])
    def test_null_scalar_is_empty(self, value):
        assert parse_tags_field(f"tags: {value}") == []

    def test_quoted_null_is_a_tag(self):
        assert parse_tags_field("tags: 'null'") == ["null"]

    def test_empty_inline(self):
        assert parse_tags_field("tags: []") == []

    def test_empty_field(self):
        assert parse_tags_field("tags:") == []

    def test_escaped_single_quote(self):
        assert parse_tags_field("tags:\n- 'it''s'") == ["it's"]

    def test_not_a_tags_field(self):
        assert parse_tags_field("title: x") == []

    def test_round_trip(self):
        tags = ["alpha", "beta-gamma", "2024", "null"]
        assert parse_tags_field(serialize_tags_field(tags)) == tags
