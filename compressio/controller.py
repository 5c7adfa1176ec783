# compressio/controller.py
import logging
import time
from dataclasses import replace
from typing import Protocol

from .models.job import (
    Category, ImageSettings, InvalidOperation, Job, JobState, Progress,
    UnsupportedFileError, VideoSettings,
)
from .parsers.ffmpeg_progress import ProgressCursor, ingest
from .utils.eta import estimate
from .utils.paths import classify, compressed_output_path

logger = logging.getLogger(__name__)


class CompressionBackend(Protocol):
    """Asynchronous compression engine.

    Calls return immediately. Results come back to the controller through
    ``on_line`` / ``on_resolved`` / ``on_failed`` tagged with ``run_id``.
    """

    def compress_image(self, run_id: int, input_path: str, output_path: str, width: int, height: int) -> None: ...

    def compress_video(self, run_id: int, input_path: str, output_path: str, auto_gpu: bool) -> None: ...

    def stop_compression(self) -> None: ...


def _dimension(key: str, value) -> int | None:
    if value is None or value == "":
        return None
    if isinstance(value, bool) or isinstance(value, float) and not value.is_integer():
        raise InvalidOperation(f"{key} must be a whole number of pixels")
    try:
        n = int(value)
    except (TypeError, ValueError):
        raise InvalidOperation(f"{key} must be a whole number of pixels, got {value!r}") from None
    if n < 0:
        raise InvalidOperation(f"{key} must not be negative")
    return n or None  # 0 => keep source size


class JobController:
    """Owns the single current job and drives it through its lifecycle."""

    def __init__(self, backend: CompressionBackend, output_suffix: str = "_compressed", default_auto_gpu: bool = True):
        self.backend = backend
        self.output_suffix = output_suffix
        self.default_auto_gpu = default_auto_gpu
        self._job: Job | None = None
        self._cursor: ProgressCursor | None = None
        self._next_run_id = 1

    @property
    def job(self) -> Job | None:
        return self._job

    @property
    def state(self) -> JobState:
        return self._job.state if self._job else JobState.IDLE

    @property
    def is_running(self) -> bool:
        return self.state is JobState.RUNNING

    def _reject(self, msg: str, exc=InvalidOperation):
        logger.warning("Rejected: %s", msg)
        raise exc(msg)

    def _default_settings(self, category: Category):
        if category is Category.IMAGE:
            return ImageSettings()
        if category is Category.VIDEO:
            return VideoSettings(auto_gpu=self.default_auto_gpu)
        return None

    # --- selection / settings ---

    def select_file(self, path: str) -> Job:
        if self.is_running:
            self._reject("A compression is running; stop it before selecting another file")
        if not path:
            self._reject("No file path given")
        category = classify(path)
        self._job = Job(source_path=str(path), category=category, settings=self._default_settings(category))
        self._cursor = None
        logger.info("Selected %s (%s)", path, category.value)
        return self._job

    def clear(self) -> None:
        if self.is_running:
            self._reject("A compression is running; stop it before clearing")
        self._job, self._cursor = None, None

    def update_settings(self, **changes) -> Job:
        job = self._job
        if job is None:
            self._reject("No file selected")
        if job.state is JobState.RUNNING:
            self._reject("Settings cannot change while compressing")
        if job.is_terminal:
            self._reject(f"Job already {job.state.value.lower()}; select the file again to reconfigure")

        settings = job.settings
        if isinstance(settings, ImageSettings):
            allowed = {"width", "height"}
        elif isinstance(settings, VideoSettings):
            allowed = {"auto_gpu"}
        else:
            allowed = set()
        if unknown := set(changes) - allowed:
            self._reject(f"{', '.join(sorted(unknown))} not applicable to {job.category.value} files")

        if isinstance(settings, ImageSettings):
            changes = {k: _dimension(k, v) for k, v in changes.items()}
        elif isinstance(settings, VideoSettings):
            changes = {k: bool(v) for k, v in changes.items()}
        if changes:
            job.settings = replace(settings, **changes)
        job.state = JobState.CONFIGURING
        logger.debug("Settings now %s", job.settings)
        return job

    # --- run ---

    def start(self) -> Job:
        job = self._job
        if job is None:
            self._reject("No file selected")
        if job.state is JobState.RUNNING:
            self._reject("A compression is already running")
        if job.is_terminal:
            self._reject("Job already finished; select a file to start a new one")
        if job.category is Category.UNSUPPORTED_DOCUMENT:
            self._reject(
                "Document compression is currently disabled. Please select a Video or Image.",
                UnsupportedFileError,
            )

        run_id, self._next_run_id = self._next_run_id, self._next_run_id + 1
        output = str(compressed_output_path(job.source_path, self.output_suffix))
        job.run_id, job.state, job.progress = run_id, JobState.RUNNING, Progress()
        job.started_at, job.last_line = time.monotonic(), ""
        self._cursor = ProgressCursor()
        logger.info("Run %d: %s -> %s", run_id, job.source_path, output)

        if job.category is Category.IMAGE:
            s = job.settings
            self.backend.compress_image(run_id, job.source_path, output, s.width or 0, s.height or 0)
        else:
            self.backend.compress_video(run_id, job.source_path, output, job.settings.auto_gpu)
        return job

    def cancel(self) -> bool:
        job = self._job
        if not job or job.state is not JobState.RUNNING:
            logger.debug("Cancel ignored, nothing running")
            return False
        self.backend.stop_compression()
        self._finish(job, JobState.CANCELLED)
        return True

    def _current(self, run_id: int) -> Job | None:
        job = self._job
        if job is None or job.run_id != run_id or job.state is not JobState.RUNNING:
            logger.debug("Discarding event for stale run %s", run_id)
            return None
        return job

    def _finish(self, job: Job, state: JobState):
        job.state, job.finished_at = state, time.monotonic()
        self._cursor = None
        logger.info("Run %s %s", job.run_id, state.value.lower())

    # --- backend events ---

    def on_line(self, run_id: int, line: str) -> bool:
        if not (job := self._current(run_id)):
            return False
        self._cursor = ingest(line, self._cursor)
        job.last_line = self._cursor.last_line
        if job.category is Category.VIDEO:
            job.progress = estimate(self._cursor, job.progress)
        return True

    def on_resolved(self, run_id: int, output_path: str) -> bool:
        if not (job := self._current(run_id)):
            return False
        job.output_path = output_path
        job.progress = Progress(percent=100, eta_seconds=0)
        self._finish(job, JobState.SUCCEEDED)
        return True

    def on_failed(self, run_id: int, detail: str) -> bool:
        if not (job := self._current(run_id)):
            return False
        job.last_error = detail
        logger.error("Run %d failed: %s", run_id, detail)
        self._finish(job, JobState.FAILED)
        return True
