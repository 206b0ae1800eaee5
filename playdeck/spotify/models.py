"""
Result types returned by the playback commands.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict

PLACEHOLDER_IMAGE_URL = "https://via.placeholder.com/300"
UNKNOWN_TITLE = "Unknown Song"
UNKNOWN_ARTIST = "Unknown Artist"


@dataclass(frozen=True)
class PlaybackSnapshot:
    """
    What is playing right now, combined with the artist's image.

    Rebuilt from two chained Spotify responses on every fetch.
    """

    title: str
    artist: str
    album_image_url: str
    artist_image_url: str
    progress_ms: int = 0
    duration_ms: int = 0

    def __post_init__(self):
        # null positions (e.g. while buffering) become 0
        object.__setattr__(self, "progress_ms", max(0, int(self.progress_ms or 0)))
        object.__setattr__(self, "duration_ms", max(0, int(self.duration_ms or 0)))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
