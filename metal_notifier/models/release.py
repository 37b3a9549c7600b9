"""Data model for calendar releases."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List


class Platform(str, Enum):
    """Where a release can be listened to."""

    YOUTUBE = "YouTube"
    BANDCAMP = "Bandcamp"


@dataclass(frozen=True)
class Link:
    """A named external link for a release."""

    platform: Platform
    url: str


@dataclass
class Release:
    """Represents an album released on a given day."""

    artist: str
    album: str
    links: List[Link] = field(default_factory=list)

    def __hash__(self):
        return hash((self.artist.lower(), self.album.lower()))

    def __eq__(self, other):
        if not isinstance(other, Release):
            return False
        return (
            self.artist.lower() == other.artist.lower()
            and self.album.lower() == other.album.lower()
        )
