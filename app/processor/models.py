import secrets
from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import BinaryIO

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def new_job_timestamp(now: datetime | None = None) -> str:
    """Second-resolution timestamp plus a random suffix: ``20240131_142501_1a2b3c4d``."""
    moment = now if now is not None else datetime.now()
    return f"{moment.strftime(TIMESTAMP_FORMAT)}_{secrets.token_hex(4)}"


@dataclass(frozen=True)
class ProcessingRequest:
    """An uploaded video awaiting processing. Consumed once."""

    source: BinaryIO
    declared_filename: str
    job_timestamp: str


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of one processing request, returned as data on every path."""

    success: bool
    message: str
    archive_key: str | None = None
    download_url: str | None = None
    frame_count: int = 0
    frame_names: list[str] = field(default_factory=list)

    @classmethod
    def failure(cls, message: str) -> "ProcessingResult":
        return cls(success=False, message=message)

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
