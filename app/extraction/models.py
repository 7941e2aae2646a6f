from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, order=True)
class Frame:
    """A still image written into a job workspace, ordered by sequence."""

    sequence: int
    path: Path

    @property
    def name(self) -> str:
        return self.path.name
