# compressio/workers/compressor.py
import logging
import re
import shlex
import subprocess
from contextlib import nullcontext
from pathlib import Path

from PySide6.QtCore import QObject, QThread, Signal

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(rb"[\r\n]+")


def build_video_command(settings: dict, input_path: str, output_path: str, auto_gpu: bool) -> list[str]:
    cmd = [settings.get("ffmpeg_path") or "ffmpeg", "-hide_banner", "-y"]
    if auto_gpu:
        # ffmpeg picks a hardware decoder when one exists and falls back to software otherwise
        cmd.extend(["-hwaccel", "auto"])
    cmd.extend(["-threads", "0", "-i", input_path, "-preset", settings.get("video_preset") or "superfast", output_path])
    return cmd


def build_image_command(settings: dict, input_path: str, output_path: str, width: int, height: int) -> list[str]:
    cmd = [settings.get("ffmpeg_path") or "ffmpeg", "-hide_banner", "-y", "-i", input_path]
    if width > 0 or height > 0:
        cmd.extend(["-vf", f"scale={width if width > 0 else -1}:{height if height > 0 else -1}"])
    cmd.append(output_path)
    return cmd


class CompressWorker(QObject):
    line_out = Signal(int, str)
    finished_ok = Signal(int, str)
    failed = Signal(int, str)
    done = Signal(int)

    def __init__(self, settings: dict, run_id: int, cmd: list[str], output_path: str, stream: bool):
        super().__init__()
        self.settings = settings
        self.run_id = run_id
        self.cmd = cmd
        self.output_path = output_path
        self.stream = stream
        self.proc: subprocess.Popen | None = None
        self._stop = False

    @property
    def cmdline(self) -> str:
        return " ".join(shlex.quote(c) for c in self.cmd)

    def stop(self):
        self._stop = True
        proc = self.proc
        if proc and proc.poll() is None:
            proc.terminate()

    def run(self):
        logger.info("Run %d: $ %s", self.run_id, self.cmdline)
        log_path = Path(f"{self.output_path}.log") if self.settings.get("write_log_file") else None
        last_line = ""
        try:
            with (
                (open(log_path, "a", encoding="utf-8") if log_path else nullcontext()) as lf,
                subprocess.Popen(
                    self.cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.PIPE,
                ) as proc,
            ):
                self.proc = proc
                if self._stop:
                    proc.terminate()
                if lf:
                    lf.write(f"$ {self.cmdline}\n")

                def handle(raw: bytes):
                    nonlocal last_line
                    if not (line := raw.decode("utf-8", errors="replace").strip()):
                        return
                    last_line = line
                    if lf:
                        lf.write(line + "\n")
                    if self.stream:
                        self.line_out.emit(self.run_id, line)
                    else:
                        logger.debug("Run %d: %s", self.run_id, line)

                # ffmpeg ends its stats lines with a bare "\r"; emit each one as soon as it is complete
                tail = b""
                while chunk := proc.stderr.read1(8192):
                    *lines, tail = _LINE_BREAK.split(tail + chunk)
                    for raw in lines:
                        handle(raw)
                if tail:
                    handle(tail)
                rc = proc.wait()

            if self._stop:
                logger.info("Run %d stopped (rc=%s)", self.run_id, rc)
                self.failed.emit(self.run_id, "Stopped")
            elif rc == 0:
                self.finished_ok.emit(self.run_id, self.output_path)
            else:
                detail = f"ffmpeg exited with code {rc}"
                self.failed.emit(self.run_id, f"{detail}: {last_line}" if last_line else detail)
        except FileNotFoundError:
            self.failed.emit(self.run_id, "ffmpeg not found (check Preferences).")
        except OSError as e:
            self.failed.emit(self.run_id, str(e))
        finally:
            self.proc = None
            self.done.emit(self.run_id)


class CompressionService(QObject):
    """Runs one CompressWorker per invocation on its own QThread.

    Worker signals are re-emitted from here so the GUI connects once;
    every event carries the run id it belongs to.
    """
    line = Signal(int, str)
    resolved = Signal(int, str)
    rejected = Signal(int, str)

    def __init__(self, settings: dict, parent=None):
        super().__init__(parent)
        self.settings = settings
        self._active: dict[int, tuple[CompressWorker, QThread]] = {}
        self._current: CompressWorker | None = None

    def compress_image(self, run_id: int, input_path: str, output_path: str, width: int, height: int) -> None:
        cmd = build_image_command(self.settings, input_path, output_path, width, height)
        self._launch(CompressWorker(dict(self.settings), run_id, cmd, output_path, stream=False))

    def compress_video(self, run_id: int, input_path: str, output_path: str, auto_gpu: bool) -> None:
        cmd = build_video_command(self.settings, input_path, output_path, auto_gpu)
        self._launch(CompressWorker(dict(self.settings), run_id, cmd, output_path, stream=True))

    def stop_compression(self) -> None:
        if self._current is None:
            logger.debug("Stop requested with no active process")
            return
        self._current.stop()
        self._current = None

    def is_busy(self) -> bool:
        return bool(self._active)

    def shutdown(self, wait_ms: int = 3000):
        for worker, thread in list(self._active.values()):
            worker.stop()
            thread.quit(); thread.wait(wait_ms)

    def _launch(self, worker: CompressWorker):
        thread = QThread(self)
        worker.moveToThread(thread)
        worker.line_out.connect(self.line)
        worker.finished_ok.connect(self.resolved)
        worker.failed.connect(self.rejected)
        thread.started.connect(worker.run)
        worker.done.connect(self._reap)
        self._active[worker.run_id] = (worker, thread)
        self._current = worker
        thread.start()

    def _reap(self, run_id: int):
        if entry := self._active.pop(run_id, None):
            worker, thread = entry
            if self._current is worker:
                self._current = None
            thread.quit(); thread.wait()
            worker.deleteLater(); thread.deleteLater()
