"""ASS caption text to plain text conversion.

Responsibilities:
- Turn ASS dialogue text (override tags plus `\\N` / `\\h` escapes) into
  readable plain text for the script editor.
- Avoid gluing words together where a tag group was removed, without
  inserting a stray space before trailing punctuation.
"""

from __future__ import annotations

import re

_NEWLINE_ESCAPE = re.compile(r"\\N", re.IGNORECASE)
_HARD_SPACE_ESCAPE = re.compile(r"\\h", re.IGNORECASE)
_TAG_GROUP = re.compile(r"\{[^}]*\}")
_PUNCTUATION_START = re.compile(r"^[,.:!?)}\]]")


def ass_text_to_plain(text: str | None) -> str:
    """Strip ASS override tags and expand escapes into display text.

    Escapes are expanded before tag groups are split out, so escapes inside a
    tag group vanish with it. An unterminated `{` is kept verbatim.
    """

    if not text:
        return ""
    normalized = _HARD_SPACE_ESCAPE.sub(" ", _NEWLINE_ESCAPE.sub("\n", text))

    output = ""
    for segment in _TAG_GROUP.split(normalized):
        if not segment:
            continue
        needs_space = (
            bool(output)
            and not output[-1].isspace()
            and not segment[0].isspace()
            and _PUNCTUATION_START.match(segment) is None
        )
        if needs_space:
            output += " "
        output += segment
    return output


normalize = ass_text_to_plain
