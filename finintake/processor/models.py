from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class AudioSource:
    """Reference to an uploaded recording. The extraction client reads the bytes."""

    path: Path
    mime_type: str
