"""Tests for compiling ignore rule lines."""

from __future__ import annotations

from promptpacker.ignore import Pattern, compile_pattern, compile_patterns


def test_plain_name():
    pattern = compile_pattern("build")
    assert pattern == Pattern(raw="build", segments=("build",), basename_only=True)


def test_negation_is_stripped():
    pattern = compile_pattern("!important.log")
    assert pattern is not None
    assert pattern.negated
    assert pattern.segments == ("important.log",)


def test_escaped_bang_is_literal():
    pattern = compile_pattern("\\!literal")
    assert pattern is not None
    assert not pattern.negated
    assert pattern.segments == ("!literal",)


def test_lone_bang_is_skipped():
    assert compile_pattern("!") is None


def test_comments_and_blank_lines_are_skipped():
    assert compile_pattern("# a comment") is None
    assert compile_pattern("") is None
    assert compile_pattern("   ") is None


def test_escaped_hash_is_literal():
    pattern = compile_pattern("\\#notes")
    assert pattern is not None
    assert pattern.segments == ("#notes",)


def test_trailing_whitespace_trimmed():
    pattern = compile_pattern("*.log   ")
    assert pattern is not None
    assert pattern.segments == ("*.log",)


def test_trailing_slash_marks_directory_only():
    pattern = compile_pattern("build/")
    assert pattern is not None
    assert pattern.directory_only
    assert not pattern.anchored
    assert pattern.segments == ("build",)
    # Still a base-name pattern: the slash was only a directive.
    assert pattern.basename_only


def test_leading_slash_anchors():
    pattern = compile_pattern("/build")
    assert pattern is not None
    assert pattern.anchored
    assert not pattern.basename_only
    assert pattern.segments == ("build",)


def test_inner_slash_disables_basename_matching():
    pattern = compile_pattern("docs/*.md")
    assert pattern is not None
    assert pattern.segments == ("docs", "*.md")
    assert not pattern.basename_only


def test_empty_segments_are_dropped():
    pattern = compile_pattern("a//b/")
    assert pattern is not None
    assert pattern.segments == ("a", "b")
    assert pattern.directory_only


def test_double_star_alone_keeps_one_segment():
    pattern = compile_pattern("**")
    assert pattern is not None
    assert pattern.segments == ("**",)


def test_patterns_reducing_to_nothing_are_skipped():
    assert compile_pattern("/") is None
    assert compile_pattern("//") is None
    assert compile_pattern("!/") is None


def test_negated_comment_marker_is_skipped():
    assert compile_pattern("!#x") is None


def test_compile_patterns_keeps_order_and_drops_invalid():
    patterns = compile_patterns(["# header", "*.log", "", "/", "!keep.log", "tmp/"])
    assert [p.raw for p in patterns] == ["*.log", "!keep.log", "tmp/"]
