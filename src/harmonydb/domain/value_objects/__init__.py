"""Domain value objects."""

from harmonydb.domain.value_objects.artist_codes import IpiCode, IsniCode
from harmonydb.domain.value_objects.disc_title import DiscHint, parse_disc_title

__all__ = [
    "DiscHint",
    "IpiCode",
    "IsniCode",
    "parse_disc_title",
]
