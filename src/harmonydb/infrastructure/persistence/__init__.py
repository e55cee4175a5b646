"""Infrastructure persistence layer."""

from .database import Database
from .models import (
    ArtistCreditModel,
    ArtistCreditNameModel,
    ArtistModel,
    Base,
    EditModel,
    EditReleaseModel,
    MediumModel,
    RecordingModel,
    ReleaseModel,
    TrackModel,
)
from .repositories import EditRepository, ReleaseRepository

__all__ = [
    "ArtistCreditModel",
    "ArtistCreditNameModel",
    "ArtistModel",
    "Base",
    "Database",
    "EditModel",
    "EditReleaseModel",
    "EditRepository",
    "MediumModel",
    "RecordingModel",
    "ReleaseModel",
    "ReleaseRepository",
    "TrackModel",
]
