"""
Catalogue of the text maps shipped under racetracks/.

Every map is parsed when the directory is scanned, so a malformed file is
reported once up front instead of failing halfway into a race setup.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .data_models import TrackFormatError
from .track import Track, load_track_file

logger = logging.getLogger(__name__)

TRACK_SUFFIX = ".txt"


def _default_track_directory() -> Path:
    return Path(__file__).resolve().parents[2] / "racetracks"


def track_id_for(path: Path) -> str:
    return path.stem.lower().replace(" ", "_")


@dataclass(frozen=True)
class TrackDescriptor:
    track_id: str
    path: Path
    height: int
    width: int
    finish_cells: int

    def summary(self) -> str:
        return f"{self.track_id}: {self.height}x{self.width}, {self.finish_cells} finish cells ({self.path.name})"


class TrackRegistry:
    """Parsed, validated text racetracks keyed by lower-case track id."""

    def __init__(self, track_directory: Optional[Path] = None) -> None:
        self.track_directory = Path(track_directory) if track_directory else _default_track_directory()
        self._tracks: Dict[str, Track] = {}
        self._descriptors: Dict[str, TrackDescriptor] = {}
        self.rejected: Dict[str, str] = {}
        self._scan()

    def _scan(self) -> None:
        if not self.track_directory.is_dir():
            logger.warning("Track directory %s does not exist.", self.track_directory)
            return

        for path in self.track_directory.iterdir():
            if path.suffix.lower() != TRACK_SUFFIX or not path.is_file():
                continue
            track_id = track_id_for(path)
            if track_id in self._tracks:
                logger.warning("Skipping %s: track id '%s' is already taken.", path.name, track_id)
                self.rejected[path.name] = f"duplicate track id '{track_id}'"
                continue
            try:
                track = load_track_file(path, track_id=track_id)
            except TrackFormatError as exc:
                logger.warning("Skipping malformed track %s: %s", path.name, exc)
                self.rejected[path.name] = str(exc)
                continue
            if not track.finish_cells():
                logger.warning("Skipping %s: the map has no finish cell.", path.name)
                self.rejected[path.name] = "no finish cell"
                continue

            self._tracks[track_id] = track
            self._descriptors[track_id] = TrackDescriptor(
                track_id=track_id,
                path=path,
                height=track.height,
                width=track.width,
                finish_cells=len(track.finish_cells()),
            )

    def load(self, track_id: str) -> Track:
        key = track_id.lower().replace(" ", "_")
        try:
            return self._tracks[key]
        except KeyError:
            raise KeyError(f"Track '{track_id}' not found in {self.track_directory}") from None

    def list_tracks(self) -> List[TrackDescriptor]:
        return [self._descriptors[track_id] for track_id in sorted(self._descriptors)]
