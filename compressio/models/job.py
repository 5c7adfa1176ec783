# compressio/models/job.py
from dataclasses import dataclass, field
from enum import Enum


class Category(str, Enum):
    IMAGE = "Image"
    VIDEO = "Video"
    UNSUPPORTED_DOCUMENT = "UnsupportedDocument"


class JobState(str, Enum):
    IDLE = "Idle"
    SELECTED = "Selected"
    CONFIGURING = "Configuring"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"
    CANCELLED = "Cancelled"


TERMINAL_STATES = frozenset({JobState.SUCCEEDED, JobState.FAILED, JobState.CANCELLED})


class InvalidOperation(RuntimeError):
    """Raised when the controller refuses an operation in the current state."""


class UnsupportedFileError(InvalidOperation):
    pass


@dataclass
class ImageSettings:
    width: int | None = None   # None => keep source size
    height: int | None = None


@dataclass
class VideoSettings:
    auto_gpu: bool = True


@dataclass
class Progress:
    percent: int = 0
    eta_seconds: int | None = None  # negative => still calculating


@dataclass
class Job:
    source_path: str
    category: Category
    settings: ImageSettings | VideoSettings | None = None
    state: JobState = JobState.SELECTED
    progress: Progress = field(default_factory=Progress)
    output_path: str | None = None
    last_error: str | None = None
    last_line: str = ""
    run_id: int | None = None
    started_at: float | None = None
    finished_at: float | None = None

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES
