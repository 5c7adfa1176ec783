# compressio/dialogs/prefs.py
from PySide6.QtWidgets import (
    QCheckBox, QComboBox, QDialog, QDialogButtonBox, QFileDialog, QFormLayout,
    QHBoxLayout, QLabel, QLineEdit, QPushButton, QVBoxLayout
)

from ..utils.settings import LOG_LEVELS, VIDEO_PRESETS


class PrefsDialog(QDialog):
    def __init__(self, settings: dict, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Preferences")
        self.settings = settings
        self.setMinimumWidth(520)

        self.ff_edit = QLineEdit(self.settings.get("ffmpeg_path", "ffmpeg"))
        btn_browse_ff = QPushButton("Browse…"); btn_browse_ff.clicked.connect(self._browse_ff)

        self.preset = QComboBox(); self.preset.addItems(VIDEO_PRESETS)
        self.preset.setCurrentText(self.settings.get("video_preset", "superfast"))

        self.suffix_edit = QLineEdit(self.settings.get("output_suffix", "_compressed"))
        suffix_hint = QLabel("(clip.mp4 → clip_compressed.mp4)")

        self.chk_gpu = QCheckBox("Try GPU decoding for videos (falls back to CPU)")
        self.chk_gpu.setChecked(self.settings.get("auto_gpu", True))

        # Logging
        self.chk_logfile = QCheckBox("Write ffmpeg output next to the result (*.log)")
        self.chk_logfile.setChecked(self.settings.get("write_log_file", False))

        self.log_level = QComboBox(); self.log_level.addItems(LOG_LEVELS)
        self.log_level.setCurrentText(self.settings.get("log_level", "INFO"))

        form = QFormLayout()
        row_ff = QHBoxLayout(); row_ff.addWidget(self.ff_edit); row_ff.addWidget(btn_browse_ff)
        form.addRow("ffmpeg path:", row_ff)
        form.addRow("Video preset:", self.preset)
        form.addRow("Output suffix:", self.suffix_edit); form.addRow("", suffix_hint)
        form.addRow("", self.chk_gpu)
        form.addRow("", self.chk_logfile)
        form.addRow("Log level:", self.log_level)

        buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        buttons.accepted.connect(self.accept); buttons.rejected.connect(self.reject)

        layout = QVBoxLayout(self); layout.addLayout(form); layout.addWidget(buttons)

    def _browse_ff(self):
        f, _ = QFileDialog.getOpenFileName(self, "Locate ffmpeg", self.ff_edit.text() or "/usr/bin", "All (*)")
        if f: self.ff_edit.setText(f)

    def get_values(self) -> dict:
        return {
            "ffmpeg_path": self.ff_edit.text().strip() or "ffmpeg",
            "video_preset": self.preset.currentText(),
            "output_suffix": self.suffix_edit.text().strip() or "_compressed",
            "auto_gpu": self.chk_gpu.isChecked(),
            "write_log_file": self.chk_logfile.isChecked(),
            "log_level": self.log_level.currentText(),
        }
