import sys
import time
from pathlib import Path
import pytest

# Ensure repo root is on sys.path so `import compressio...` works in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from compressio.controller import JobController  # noqa: E402


class FakeBackend:
    """Records every backend call instead of running ffmpeg."""

    def __init__(self):
        self.calls = []
        self.stops = 0

    def compress_image(self, run_id, input_path, output_path, width, height):
        self.calls.append(("image", run_id, input_path, output_path, width, height))

    def compress_video(self, run_id, input_path, output_path, auto_gpu):
        self.calls.append(("video", run_id, input_path, output_path, auto_gpu))

    def stop_compression(self):
        self.stops += 1


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def controller(backend):
    return JobController(backend)


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication
    return QCoreApplication.instance() or QCoreApplication([])


def pump(app, until, timeout: float = 5.0) -> bool:
    """Process Qt events until ``until()`` is true or the timeout passes."""
    deadline = time.monotonic() + timeout
    while not until() and time.monotonic() < deadline:
        app.processEvents()
        time.sleep(0.01)
    app.processEvents()
    return until()
