"""Propose medium positions for an APPEND merge.

Appending glues the mediums of several releases into one. Every medium needs a position that is
unique on the resulting release. We keep each medium's own position where we can, read the
"(disc N: Name)" hint out of single-disc release titles, and push collisions to the end.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from harmonydb.domain.entities import Release
from harmonydb.domain.value_objects.disc_title import parse_disc_title
from harmonydb.domain.value_objects.merge import MediumPosition

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReleaseMediumGroup:
    """Form view: one release with its proposed medium positions."""

    release: Release
    mediums: tuple[MediumPosition, ...]


def _ordered_for_target(releases: Sequence[Release], target_id: int | None) -> list[Release]:
    ordered = list(releases)
    if target_id is None:
        return ordered
    # Stable: target first, everything else keeps its relative order.
    ordered.sort(key=lambda r: r.id != target_id)
    return ordered


def reconcile_medium_positions(
    releases: Sequence[Release], target_id: int | None = None
) -> list[MediumPosition]:
    """Propose a collision-free position (and name) for every medium.

    Args:
        releases: Candidate releases, in the order the editor selected them
        target_id: Release that will survive; its mediums claim positions
            first. Defaults to the first release.

    Returns:
        One MediumPosition per medium, stably sorted by new position.
    """
    taken: set[int] = set()
    proposals: list[MediumPosition] = []

    for release in _ordered_for_target(releases, target_id):
        for medium in sorted(release.mediums, key=lambda m: m.position):
            position = medium.position
            name = medium.name or ""

            if release.medium_count == 1 and not medium.name:
                hint = parse_disc_title(release.name)
                if hint is not None:
                    position = hint.position
                    name = hint.name

            if position in taken:
                bumped = max(taken) + 1
                logger.debug(
                    f"Medium {medium.id} of release {release.id}: position {position} "
                    f"already taken, moving to {bumped}"
                )
                position = bumped

            taken.add(position)
            proposals.append(
                MediumPosition(
                    medium_id=medium.id,
                    release_id=release.id,
                    old_position=medium.position,
                    new_position=position,
                    old_name=medium.name or "",
                    new_name=name,
                )
            )

    return sorted(proposals, key=lambda p: p.new_position)


def group_by_release(
    positions: Sequence[MediumPosition], releases: Sequence[Release]
) -> list[ReleaseMediumGroup]:
    """Group proposals by release, releases in candidate order, mediums by new position."""
    return [
        ReleaseMediumGroup(
            release=release,
            mediums=tuple(p for p in positions if p.release_id == release.id),
        )
        for release in releases
    ]
