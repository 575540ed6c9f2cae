"""Blank counting for prompt cards.

A blank is a maximal run of underscores, so "____" is one blank and
"a__b___c" is two. A prompt's `pick` (how many responses a player submits)
defaults to the blank count, with a floor of one.
"""

import re

_BLANK_RE = re.compile(r"_+")


def count_blanks(text: str) -> int:
    return len(_BLANK_RE.findall(text))


def default_pick(text: str, pick: int | None = None) -> int:
    """Return `pick` if it is already a usable value, else derive it from `text`."""
    if isinstance(pick, int) and not isinstance(pick, bool) and pick >= 1:
        return pick
    return max(count_blanks(text), 1)
