# ===============================================
# tests/test_sanitizer.py
# Marker stripping + whitespace collapse.
# ===============================================

import pytest

from persona_relay.relay.sanitizer import clean


def test_empty_stays_empty():
    assert clean("") == ""


def test_plain_text_untouched():
    assert clean("Hello there") == "Hello there"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("[control_12]Hello", "Hello"),
        ("Hel<unk>lo", "Hello"),
        ("[TOOL_CALLS] call me", " call me"),
        ("done [TOOL_RESULTS]", "done "),
        ("a [control_1] <unk> [TOOL_CALLS] b", "a b"),
        ("<unk>[TOOL_RESULTS][control_7]x", "x"),
    ],
)
def test_markers_removed(raw, expected):
    assert clean(raw) == expected


def test_whitespace_collapsed_after_removal():
    # the marker sat between two spaces; only one survives
    assert clean("left [control_3] right") == "left right"
    assert clean("tabs\t\tand\n\nnewlines") == "tabs and newlines"


def test_control_marker_needs_digits():
    assert clean("[control_]") == "[control_]"
    assert clean("[control_x1]") == "[control_x1]"


def test_nested_markers_removed():
    assert clean("[cont[control_1]rol_2]") == ""
    assert clean("<u<unk>nk>!") == "!"


@pytest.mark.parametrize(
    "raw",
    [
        "  spaced   out  ",
        "[cont[control_1]rol_2] tail",
        "<unk> [TOOL_CALLS]\t[control_99]  words  <unk>",
        "[TOOL_[TOOL_CALLS]RESULTS]",
    ],
)
def test_idempotent(raw):
    once = clean(raw)
    assert clean(once) == once
    assert "<unk>" not in once
    assert "[TOOL_CALLS]" not in once and "[TOOL_RESULTS]" not in once
