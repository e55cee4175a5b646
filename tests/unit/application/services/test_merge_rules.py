"""Unit tests for merge strategy applicability."""

from harmonydb.application.services.release_merge import can_merge
from harmonydb.domain.value_objects.merge import MergeStrategy


def _all_positions(*releases) -> dict[int, int]:
    mediums = [m for release in releases for m in release.mediums]
    return {medium.id: position for position, medium in enumerate(mediums, start=1)}


class TestCanMergeCommon:
    """Rules shared by both strategies."""

    def test_needs_two_releases(self, entities) -> None:
        only = entities.release()
        assert not can_merge(MergeStrategy.MERGE, only.id, [only])
        assert not can_merge(MergeStrategy.APPEND, only.id, [only], _all_positions(only))

    def test_target_must_be_a_candidate(self, entities) -> None:
        a = entities.release()
        b = entities.release()
        outsider = entities.release()

        assert not can_merge(MergeStrategy.MERGE, outsider.id, [a, b])
        assert not can_merge(MergeStrategy.APPEND, outsider.id, [a, b], _all_positions(a, b))


class TestCanMergeMerge:
    """Rules for MERGE."""

    def test_equal_track_counts(self, entities) -> None:
        a = entities.release(discs=(3, 2))
        b = entities.release(discs=(3, 2))
        assert can_merge(MergeStrategy.MERGE, a.id, [a, b])

    def test_track_count_mismatch(self, entities) -> None:
        a = entities.release(discs=(3,))
        b = entities.release(discs=(4,))
        assert not can_merge(MergeStrategy.MERGE, a.id, [a, b])

    def test_extra_source_medium_is_fine(self, entities) -> None:
        a = entities.release(discs=(3,))
        b = entities.release(discs=(3, 5))
        assert can_merge(MergeStrategy.MERGE, a.id, [a, b])


class TestCanMergeAppend:
    """Rules for APPEND."""

    def test_unique_positions_for_every_medium(self, entities) -> None:
        a = entities.release(discs=(1, 1))
        b = entities.release(discs=(1,))
        assert can_merge(MergeStrategy.APPEND, a.id, [a, b], _all_positions(a, b))

    def test_track_counts_dont_matter(self, entities) -> None:
        a = entities.release(discs=(1,))
        b = entities.release(discs=(9,))
        assert can_merge(MergeStrategy.APPEND, a.id, [a, b], _all_positions(a, b))

    def test_duplicate_positions(self, entities) -> None:
        a = entities.release(discs=(1,))
        b = entities.release(discs=(1,))
        positions = {a.mediums[0].id: 1, b.mediums[0].id: 1}
        assert not can_merge(MergeStrategy.APPEND, a.id, [a, b], positions)

    def test_missing_medium(self, entities) -> None:
        a = entities.release(discs=(1,))
        b = entities.release(discs=(1,))
        assert not can_merge(MergeStrategy.APPEND, a.id, [a, b], {a.mediums[0].id: 1})

    def test_unknown_medium(self, entities) -> None:
        a = entities.release(discs=(1,))
        b = entities.release(discs=(1,))
        positions = {**_all_positions(a, b), 9999: 3}
        assert not can_merge(MergeStrategy.APPEND, a.id, [a, b], positions)

    def test_position_below_one(self, entities) -> None:
        a = entities.release(discs=(1,))
        b = entities.release(discs=(1,))
        positions = {a.mediums[0].id: 1, b.mediums[0].id: 0}
        assert not can_merge(MergeStrategy.APPEND, a.id, [a, b], positions)

    def test_no_positions(self, entities) -> None:
        a = entities.release(discs=(1,))
        b = entities.release(discs=(1,))
        assert not can_merge(MergeStrategy.APPEND, a.id, [a, b])
