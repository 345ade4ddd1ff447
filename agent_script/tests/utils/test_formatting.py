# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for text formatting helpers."""
import pytest

from agent_script.utils.formatting import (
    format_bytes,
    remove_leading_indentation,
    stable_stringify,
    truncate_content,
    truncate_content_tail,
)


class TestTruncateContent:
    def test_short_content_untouched(self):
        assert truncate_content("short", 10) == "short"

    def test_keeps_head_and_tail(self):
        content = "a" * 50 + "b" * 50

        truncated = truncate_content(content, 20)

        assert truncated == (
            "a" * 10
            + "\n\n-- Content has been truncated to be below 20 characters --\n\n"
            + "b" * 10
        )

    def test_tail_truncation(self):
        assert truncate_content_tail("abcdef", 3) == "abc ... (truncated)"
        assert truncate_content_tail("abc", 3) == "abc"


@pytest.mark.parametrize(
    "num_bytes,expected",
    [
        (0, "0 Bytes"),
        (1, "1 Bytes"),
        (1023, "1023 Bytes"),
        (1024, "1 KB"),
        (1536, "1.5 KB"),
        (1024 * 1024 * 3, "3 MB"),
        (int(1024 ** 3 * 2.25), "2.25 GB"),
    ],
    ids=["zero", "one", "below-kb", "kb", "fraction", "mb", "gb"],
)
def test_format_bytes(num_bytes, expected):
    assert format_bytes(num_bytes) == expected


def test_remove_leading_indentation():
    text = """First line
        indented block
          nested
        back"""

    assert remove_leading_indentation(text) == "First line\nindented block\n  nested\nback"


def test_remove_leading_indentation_including_first_line():
    text = "    a\n      b"
    assert remove_leading_indentation(text, exclude_first_non_empty_line=False) == "a\n  b"


def test_stable_stringify_sorts_keys():
    assert stable_stringify({"b": 1, "a": {"d": 2, "c": 3}}) == '{"a":{"c":3,"d":2},"b":1}'
    assert stable_stringify({"a": 1, "b": 2}) == stable_stringify({"b": 2, "a": 1})
