"""Disc hints embedded in release titles.

Hey future me - before multi-disc releases were modelled properly, every disc of a box set was
entered as its own single-medium release titled like:

    "Greatest Hits (disc 1)"
    "Greatest Hits (disc 2: Bonus Tracks)"

When those releases get appended back together, the title is the only place the disc number and
disc name survive. parse_disc_title() digs them out. If the title doesn't match, callers keep the
medium's own position/name - we never guess.
"""

import re
from dataclasses import dataclass

# "(disc N)" or "(disc N: Name)" anywhere in the title. The name is non-greedy so
# "(disc 2: Live) (Remastered)" yields "Live", not "Live) (Remastered".
DISC_TITLE_PATTERN = re.compile(r"\(disc (?P<position>\d+)(?:: (?P<name>.+?))?\)")


@dataclass(frozen=True)
class DiscHint:
    """Disc position and name parsed from a release title."""

    position: int
    name: str


def parse_disc_title(title: str | None) -> DiscHint | None:
    """Extract the disc hint from a release title.

    Args:
        title: Release title, e.g. "Album (disc 2: Bonus)"

    Returns:
        DiscHint(position=2, name="Bonus"), or None when the title carries no
        usable hint (no match, or disc 0 which can't be a 1-based position).

    Examples:
        >>> parse_disc_title("Album (disc 2: Bonus)")
        DiscHint(position=2, name='Bonus')
        >>> parse_disc_title("Album (disc 3)")
        DiscHint(position=3, name='')
        >>> parse_disc_title("Album (disc two)") is None
        True
    """
    if not title:
        return None

    match = DISC_TITLE_PATTERN.search(title)
    if not match:
        return None

    position = int(match.group("position"))
    if position < 1:
        return None

    return DiscHint(position=position, name=match.group("name") or "")
