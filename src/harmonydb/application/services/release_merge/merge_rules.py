"""Structural checks deciding whether a merge strategy applies to a set of releases."""

import logging
from collections.abc import Mapping, Sequence

from harmonydb.domain.entities import Release
from harmonydb.domain.value_objects.merge import MergeStrategy

logger = logging.getLogger(__name__)


def can_merge(
    strategy: MergeStrategy,
    target_id: int,
    releases: Sequence[Release],
    medium_positions: Mapping[int, int] | None = None,
) -> bool:
    """Check whether ``strategy`` can merge ``releases`` into ``target_id``.

    Args:
        strategy: APPEND or MERGE
        target_id: Id of the release that survives
        releases: All candidate releases, target included
        medium_positions: For APPEND, medium id → requested new position

    Returns:
        True when the merge is structurally possible. A False is an input
        problem for the editor to fix, never an error.
    """
    if len(releases) < 2:
        return False

    by_id = {release.id: release for release in releases}
    target = by_id.get(target_id)
    if target is None:
        return False

    sources = [release for release in releases if release.id != target_id]

    if strategy is MergeStrategy.MERGE:
        return _can_merge_mediums(target, sources)
    if strategy is MergeStrategy.APPEND:
        return _can_append_mediums(releases, medium_positions or {})

    return False


# Yo, MERGE folds mediums at the same position into one. That only works when both sides have
# the same number of tracks - otherwise there's no sane track-to-track pairing. Source mediums
# at positions the target doesn't have are simply moved over, so they're fine.
def _can_merge_mediums(target: Release, sources: Sequence[Release]) -> bool:
    for source in sources:
        for medium in source.mediums:
            target_medium = target.medium_at(medium.position)
            if target_medium is None:
                continue
            if target_medium.track_count != medium.track_count:
                logger.info(
                    f"Cannot merge release {source.id} into {target.id}: medium "
                    f"{medium.position} has {medium.track_count} tracks, target has "
                    f"{target_medium.track_count}"
                )
                return False
    return True


def _can_append_mediums(
    releases: Sequence[Release], medium_positions: Mapping[int, int]
) -> bool:
    medium_ids = {medium.id for release in releases for medium in release.mediums}

    if set(medium_positions) != medium_ids:
        return False

    positions = list(medium_positions.values())
    if any(position < 1 for position in positions):
        return False
    return len(positions) == len(set(positions))
