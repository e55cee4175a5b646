"""Decide which recordings a release merge would unify.

Hey future me - when releases are MERGEd (not appended), tracks at the same medium/track
position are assumed to be the same song, so their recordings get merged too. The surviving
release's recording wins (destination); recordings of the other releases at that spot become
sources. Nothing here blocks a merge - suspicious groups are only flagged via is_bad.
"""

from collections.abc import Sequence

from harmonydb.domain.entities import Recording, Release
from harmonydb.domain.value_objects.merge import RecordingMergeGroup


def calculate_recording_merges(
    target: Release, sources: Sequence[Release]
) -> list[RecordingMergeGroup]:
    """Group recordings of ``sources`` under the recordings of ``target`` by position.

    Args:
        target: Release that survives the merge
        sources: Releases merged into it (the target must not be among them)

    Returns:
        One group per target track that has at least one *different* recording
        at the same medium/track position on a source release, ordered by
        medium position then track position.
    """
    groups: list[RecordingMergeGroup] = []

    for medium in sorted(target.mediums, key=lambda m: m.position):
        for track in sorted(medium.tracks, key=lambda t: t.position):
            found: list[Recording] = []
            seen_ids: set[int] = {track.recording_id}

            for source in sources:
                source_medium = source.medium_at(medium.position)
                if source_medium is None:
                    continue
                source_track = source_medium.track_at(track.position)
                if source_track is None or source_track.recording_id in seen_ids:
                    continue
                seen_ids.add(source_track.recording_id)
                found.append(source_track.recording)

            if found:
                groups.append(
                    RecordingMergeGroup(
                        medium=medium.position,
                        track=track.position,
                        destination=track.recording,
                        sources=tuple(found),
                    )
                )

    return groups


def determine_recording_merges(releases: Sequence[Release]) -> list[RecordingMergeGroup]:
    """Recording merges for a candidate set where the first release survives."""
    if len(releases) < 2:
        return []
    target, *others = releases
    return calculate_recording_merges(target, others)


def find_bad_recording_merges(
    groups: Sequence[RecordingMergeGroup],
) -> list[RecordingMergeGroup]:
    """Groups whose recordings don't share a single artist credit."""
    return [group for group in groups if group.is_bad]
