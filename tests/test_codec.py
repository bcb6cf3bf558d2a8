"""
Tests for the category file codec.

decode/encode_append/filter_out operate on plain strings; no filesystem.
"""

from tagmem.codec import (
    RECORD_SEPARATOR,
    UNTAGGED_KEY,
    decode,
    encode_append,
    filter_out,
    flatten,
    tag_key,
)


# -----------------------------------------------------------------------------
# decode
# -----------------------------------------------------------------------------

class TestDecode:

    def test_empty_content(self):
        assert decode("") == {}

    def test_whitespace_only_content(self):
        assert decode("\n\n  \n\n\t\n") == {}

    def test_tagged_block(self):
        assert decode("# tag1\nhello\n\n") == {"tag1": ["hello"]}

    def test_multiple_tags_form_space_joined_key(self):
        assert decode("# tag2 tag3\nbody\n\n") == {"tag2 tag3": ["body"]}

    def test_tag_line_whitespace_is_normalized(self):
        """Runs of whitespace between tags collapse to one space in the key."""
        assert decode("#   a \t  b  \nbody\n\n") == {"a b": ["body"]}

    def test_untagged_block(self):
        assert decode("plain fact\n\n") == {UNTAGGED_KEY: ["plain fact"]}

    def test_multiline_block_gives_one_entry_per_line(self):
        content = "# t\nfirst\nsecond\n\n"
        assert decode(content) == {"t": ["first", "second"]}

    def test_blank_lines_inside_block_are_dropped(self):
        content = "# t\nfirst\n   \nsecond\n\n"
        # "\n   \n" does not split (not two consecutive newlines)
        assert decode(content) == {"t": ["first", "second"]}

    def test_same_tag_key_blocks_merge_in_file_order(self):
        content = "# t\none\n\n# other\nx\n\n# t\ntwo\n\n"
        assert decode(content) == {"t": ["one", "two"], "other": ["x"]}

    def test_key_order_is_first_appearance(self):
        content = "b-first\n\n# z\nz1\n\n# a\na1\n\nb-second\n\n"
        result = decode(content)
        assert list(result) == [UNTAGGED_KEY, "z", "a"]
        assert result[UNTAGGED_KEY] == ["b-first", "b-second"]

    def test_tag_line_only_block_creates_empty_group(self):
        assert decode("# lonely\n\n") == {"lonely": []}

    def test_bare_hash_gives_empty_key(self):
        assert decode("#\nbody\n\n") == {"": ["body"]}

    def test_entries_keep_their_leading_whitespace(self):
        assert decode("  indented\n\n") == {UNTAGGED_KEY: ["  indented"]}

    def test_content_without_trailing_separator(self):
        assert decode("# t\nlast") == {"t": ["last"]}

    def test_extra_separator_runs_are_skipped(self):
        content = "# t\none\n\n\n\n# t\ntwo\n\n\n\n"
        assert decode(content) == {"t": ["one", "two"]}


# -----------------------------------------------------------------------------
# encode_append
# -----------------------------------------------------------------------------

class TestEncodeAppend:

    def test_with_tags(self):
        assert encode_append(["style", "js"], "Uses eslint") == "# style js\nUses eslint\n\n"

    def test_without_tags(self):
        assert encode_append([], "Uses eslint") == "Uses eslint\n\n"

    def test_fragment_ends_with_record_separator(self):
        assert encode_append(["t"], "x").endswith(RECORD_SEPARATOR)

    def test_appending_same_tags_twice_makes_two_blocks(self):
        content = encode_append(["t"], "one") + encode_append(["t"], "two")
        assert content.count("# t") == 2
        assert decode(content) == {"t": ["one", "two"]}

    def test_appended_fragments_decode_back(self):
        content = (
            encode_append(["style"], "Uses 2-space indentation")
            + encode_append([], "Likes tea")
            + encode_append(["tools"], "Uses eslint")
        )
        assert decode(content) == {
            "style": ["Uses 2-space indentation"],
            UNTAGGED_KEY: ["Likes tea"],
            "tools": ["Uses eslint"],
        }


# -----------------------------------------------------------------------------
# filter_out
# -----------------------------------------------------------------------------

class TestFilterOut:

    def test_removes_matching_block(self):
        content = "# a\nkeep me\n\n# b\ndrop me\n\n"
        assert filter_out(content, "drop") == "# a\nkeep me\n\n"

    def test_match_on_tag_line_drops_whole_block(self):
        content = "# secret\none\ntwo\n\n# public\nthree\n\n"
        result = filter_out(content, "secret")
        assert decode(result) == {"public": ["three"]}

    def test_partial_match(self):
        content = "Uses 2-space indentation\n\nUses eslint\n\n"
        assert decode(filter_out(content, "space")) == {UNTAGGED_KEY: ["Uses eslint"]}

    def test_case_sensitive(self):
        content = "Uses eslint\n\n"
        assert filter_out(content, "ESLINT") == content

    def test_removes_every_matching_block(self):
        content = "# t\napple pie\n\n# t\napple juice\n\n# t\npear\n\n"
        assert decode(filter_out(content, "apple")) == {"t": ["pear"]}

    def test_no_match_returns_content_unchanged(self):
        content = "# t\none\n\n\n\nstray\n\n"
        assert filter_out(content, "nothing") == content

    def test_removing_everything_leaves_separator_residue(self):
        """Only the empty trailing fragment survives; it decodes to nothing."""
        content = "# t\none\n\n"
        result = filter_out(content, "one")
        assert result == ""
        assert decode(result) == {}

    def test_block_boundaries_are_raw_text(self):
        """A match spanning a separator matches no single block."""
        content = "alpha\n\nbeta\n\n"
        assert filter_out(content, "alpha\n\nbeta") == content


# -----------------------------------------------------------------------------
# Helpers
# -----------------------------------------------------------------------------

class TestHelpers:

    def test_tag_key(self):
        assert tag_key(["a", "b"]) == "a b"
        assert tag_key([]) == ""

    def test_flatten_preserves_group_then_entry_order(self):
        grouped = {"style": ["a", "b"], UNTAGGED_KEY: ["c"], "tools": ["d"]}
        assert flatten(grouped) == ["a", "b", "c", "d"]

    def test_flatten_empty(self):
        assert flatten({}) == []
