# compressio/main_window.py
import logging
import time
from pathlib import Path

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QCheckBox, QDialog, QFileDialog, QGroupBox, QHBoxLayout, QLabel, QMainWindow,
    QMessageBox, QProgressBar, QPushButton, QSpinBox, QTextEdit, QVBoxLayout, QWidget
)

from .controller import JobController
from .dialogs.prefs import PrefsDialog
from .models.job import Category, InvalidOperation, JobState, UnsupportedFileError
from .utils.eta import format_elapsed, format_eta
from .utils.paths import MEDIA_FILTER, type_label
from .utils.settings import load_settings, save_settings
from .widgets.drop_zone import DropZone
from .workers.compressor import CompressionService

logger = logging.getLogger(__name__)

_STATUS_TEXT = {
    JobState.IDLE: "Idle",
    JobState.SELECTED: "Ready",
    JobState.CONFIGURING: "Ready",
    JobState.RUNNING: "Working...",
    JobState.SUCCEEDED: "Done",
    JobState.FAILED: "Failed",
    JobState.CANCELLED: "Stopped",
}


class MainWindow(QMainWindow):
    def __init__(self, settings: dict | None = None):
        super().__init__()
        self.setWindowTitle("Compress I/O")
        self.resize(560, 520)
        self.settings = settings if settings is not None else load_settings()
        self._syncing = False

        self.service = CompressionService(self.settings, self)
        self.controller = JobController(
            self.service,
            output_suffix=self.settings.get("output_suffix", "_compressed"),
            default_auto_gpu=bool(self.settings.get("auto_gpu", True)),
        )
        self.service.line.connect(self.on_line)
        self.service.resolved.connect(self.on_resolved)
        self.service.rejected.connect(self.on_failed)

        self.status_label = QLabel(); self.status_label.setStyleSheet("font-weight:600;")

        self.drop = DropZone("+\nClick or drop media here")
        self.drop.clicked.connect(self.select_file)
        self.drop.pathDropped.connect(self._select_path)

        self.file_label = QLabel(); self.file_label.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.btn_remove = QPushButton("✕"); self.btn_remove.setFixedWidth(32); self.btn_remove.clicked.connect(self.remove_file)
        file_row = QHBoxLayout(); file_row.addWidget(self.file_label, 1); file_row.addWidget(self.btn_remove)

        # Image rescale (0 => keep that side proportional)
        self.width_spin = QSpinBox(); self.width_spin.setRange(0, 16384); self.width_spin.setSpecialValueText("Width (auto)")
        self.height_spin = QSpinBox(); self.height_spin.setRange(0, 16384); self.height_spin.setSpecialValueText("Height (auto)")
        self.width_spin.valueChanged.connect(lambda v: self._update_settings(width=v))
        self.height_spin.valueChanged.connect(lambda v: self._update_settings(height=v))
        self.image_box = QGroupBox("Rescale Dimensions (Pixels)")
        row_dim = QHBoxLayout(self.image_box); row_dim.addWidget(self.width_spin); row_dim.addWidget(self.height_spin)

        self.chk_gpu = QCheckBox("Use GPU acceleration when available")
        self.chk_gpu.toggled.connect(lambda on: self._update_settings(auto_gpu=on))

        self.btn_start = QPushButton("Start Optimization"); self.btn_start.clicked.connect(self.start)
        self.btn_stop = QPushButton("Stop Process"); self.btn_stop.clicked.connect(self.stop)

        self.bar = QProgressBar(); self.bar.setRange(0, 100); self.bar.setTextVisible(True)
        self.eta_label = QLabel()
        self.log_label = QLabel(); self.log_label.setStyleSheet("font-family: monospace;")

        self.console = QTextEdit(); self.console.setReadOnly(True)
        self.console.setPlaceholderText("ffmpeg output will appear here…")

        central = QWidget(); v = QVBoxLayout(central)
        v.addWidget(self.status_label); v.addWidget(self.drop); v.addLayout(file_row)
        v.addWidget(self.image_box); v.addWidget(self.chk_gpu)
        for w in (self.btn_start, self.btn_stop, self.bar, self.eta_label, self.log_label, self.console): v.addWidget(w)
        self.setCentralWidget(central)

        m = self.menuBar().addMenu("&Options")
        act_prefs = QAction("Preferences…", self); act_prefs.triggered.connect(self.open_prefs); m.addAction(act_prefs)

        self._restore_layout()
        self._render()

    def _restore_layout(self):
        if geo := self.settings.get("window_geometry"):
            if len(geo) == 4: self.setGeometry(*(int(x) for x in geo))

    def _save_layout(self):
        g = self.geometry()
        self.settings["window_geometry"] = [g.x(), g.y(), g.width(), g.height()]
        save_settings(self.settings)

    def closeEvent(self, e):
        self.controller.cancel()
        if self.service.is_busy(): self.service.shutdown()
        self._save_layout()
        super().closeEvent(e)

    def _refuse(self, err: InvalidOperation, title: str = "Not now"):
        QMessageBox.information(self, title, str(err))

    # --- user actions ---

    def select_file(self):
        if self.controller.is_running: return
        f, _ = QFileDialog.getOpenFileName(self, "Select media", str(Path.home()), MEDIA_FILTER)
        if f: self._select_path(f)

    def _select_path(self, path: str):
        try:
            job = self.controller.select_file(path)
        except InvalidOperation as e:
            self._refuse(e); return
        self.console.clear()
        self._syncing = True
        try:
            self.width_spin.setValue(0); self.height_spin.setValue(0)
            if job.category is Category.VIDEO: self.chk_gpu.setChecked(job.settings.auto_gpu)
        finally:
            self._syncing = False
        self._render()

    def remove_file(self):
        try:
            self.controller.clear()
        except InvalidOperation as e:
            self._refuse(e); return
        self.console.clear()
        self._render()

    def _update_settings(self, **changes):
        if self._syncing: return
        try:
            self.controller.update_settings(**changes)
        except InvalidOperation as e:
            self._refuse(e)
        self._render()

    def start(self):
        try:
            self.controller.start()
        except UnsupportedFileError as e:
            self._refuse(e, "Feature Disabled"); self._render(); return
        except InvalidOperation as e:
            self._refuse(e); return
        self.console.clear(); self.console.append("=== Starting ===")
        self._render()

    def stop(self):
        if self.controller.cancel():
            self.console.append(">>> Stop requested, terminating ffmpeg…")
        self._render()

    # --- backend events ---

    def on_line(self, run_id: int, line: str):
        if self.controller.on_line(run_id, line):
            self.console.append(line)
            self._render()

    def on_resolved(self, run_id: int, output_path: str):
        if self.controller.on_resolved(run_id, output_path):
            self.console.append("=== Finished ===")
            self._render()
            QMessageBox.information(self, "Compress I/O", f"Saved to: {output_path}")

    def on_failed(self, run_id: int, detail: str):
        if self.controller.on_failed(run_id, detail):
            self.console.append(f"ERROR: {detail}")
            self._render()

    # --- view ---

    def _render(self):
        job, state = self.controller.job, self.controller.state
        running = state is JobState.RUNNING
        self.status_label.setText(_STATUS_TEXT[state])

        self.drop.setVisible(job is None)
        self.file_label.setVisible(job is not None); self.btn_remove.setVisible(job is not None)
        self.btn_remove.setEnabled(not running)
        if job:
            self.file_label.setText(f"[{type_label(job.source_path)}]  {Path(job.source_path).name}")
            self.file_label.setToolTip(job.source_path)

        is_image = bool(job) and job.category is Category.IMAGE
        is_video = bool(job) and job.category is Category.VIDEO
        editable = state in (JobState.SELECTED, JobState.CONFIGURING)
        self.image_box.setVisible(is_image); self.image_box.setEnabled(editable)
        self.chk_gpu.setVisible(is_video); self.chk_gpu.setEnabled(editable)

        unsupported = bool(job) and job.category is Category.UNSUPPORTED_DOCUMENT
        self.btn_start.setText("Format Not Supported" if unsupported else "Start Optimization")
        self.btn_start.setVisible(not running); self.btn_start.setEnabled(editable)
        self.btn_stop.setVisible(running)

        show_progress = bool(job) and state not in (JobState.SELECTED, JobState.CONFIGURING)
        for w in (self.bar, self.eta_label, self.log_label): w.setVisible(show_progress)
        if not show_progress: return

        self.bar.setValue(job.progress.percent)
        end = job.finished_at if job.finished_at is not None else time.monotonic()
        elapsed = end - job.started_at if job.started_at is not None else None
        if running:
            self.eta_label.setText(f"ETA {format_eta(job.progress.eta_seconds)} • Elapsed {format_elapsed(elapsed)}")
            self.log_label.setText(job.last_line or "Initializing...")
        elif state is JobState.SUCCEEDED:
            self.eta_label.setText(f"Saved to: {job.output_path}")
            self.log_label.setText(f"Took {format_elapsed(elapsed)}")
        elif state is JobState.FAILED:
            self.eta_label.setText("Error: " + (job.last_error or ""))
            self.log_label.setText(job.last_line)
        else:
            self.eta_label.setText("Stopped.")
            self.log_label.setText("")

    def open_prefs(self):
        dlg = PrefsDialog(self.settings, self)
        if dlg.exec() == QDialog.Accepted:
            self.settings.update(dlg.get_values())
            save_settings(self.settings)
            self.controller.output_suffix = self.settings["output_suffix"]
            self.controller.default_auto_gpu = self.settings["auto_gpu"]
            logging.getLogger().setLevel(self.settings["log_level"])
            logger.info("Preferences saved")
            self.console.append("Saved preferences.")
