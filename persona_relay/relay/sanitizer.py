# Strip protocol-internal markup from model output.
# Stateless: the compiled patterns are module constants, safe to share.

from __future__ import annotations
import re

CONTROL_MARKER = r"\[control_\d+\]"
UNKNOWN_TOKEN = r"<unk>"
TOOL_MARKER = r"\[TOOL_CALLS\]|\[TOOL_RESULTS\]"

_MARKERS = re.compile(f"{CONTROL_MARKER}|{UNKNOWN_TOKEN}|{TOOL_MARKER}")
_WHITESPACE = re.compile(r"\s+")


def clean(raw: str) -> str:
    """
    Remove control markers, <unk> placeholders and tool markers, then
    collapse each whitespace run to one space.

    Removal repeats until nothing matches, so a marker that only appears
    once an inner one is cut out (``[cont[control_1]rol_2]``) goes too
    and ``clean(clean(x)) == clean(x)`` holds.
    """
    if not raw:
        return ""
    text = raw
    while True:
        stripped = _MARKERS.sub("", text)
        if stripped == text:
            break
        text = stripped
    return _WHITESPACE.sub(" ", text)
