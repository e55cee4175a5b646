"""Release merge planning.

Hey future me - this package is the PURE part of release merging. No sessions, no requests:
feed it loaded Release aggregates, get values back. ReleaseMergeService does the I/O around it.

Modules:
- recording_merges.py - which recordings get unified (MERGE)
- medium_positions.py - where every medium ends up (APPEND)
- merge_rules.py      - can this strategy work at all?
- merge_parameters.py - the directive stored in the edit
"""

from harmonydb.application.services.release_merge.medium_positions import (
    ReleaseMediumGroup,
    group_by_release,
    reconcile_medium_positions,
)
from harmonydb.application.services.release_merge.merge_parameters import (
    build_merge_parameters,
)
from harmonydb.application.services.release_merge.merge_rules import can_merge
from harmonydb.application.services.release_merge.recording_merges import (
    calculate_recording_merges,
    determine_recording_merges,
    find_bad_recording_merges,
)

__all__ = [
    "ReleaseMediumGroup",
    "build_merge_parameters",
    "calculate_recording_merges",
    "can_merge",
    "determine_recording_merges",
    "find_bad_recording_merges",
    "group_by_release",
    "reconcile_medium_positions",
]
