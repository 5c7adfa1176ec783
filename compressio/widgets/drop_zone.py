# compressio/widgets/drop_zone.py
from pathlib import Path
from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel


class DropZone(QLabel):
    """Click or drop target for a single media file."""
    pathDropped = Signal(str)
    clicked = Signal()

    def __init__(self, *a, **kw):
        super().__init__(*a, **kw)
        self.setAcceptDrops(True)
        self.setAlignment(Qt.AlignCenter)
        self.setMinimumHeight(120)
        self.setCursor(Qt.PointingHandCursor)
        self.setStyleSheet("border: 2px dashed #999; border-radius: 12px; padding: 16px;")

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton and self.isEnabled():
            self.clicked.emit()
        super().mouseReleaseEvent(event)

    def dragEnterEvent(self, event):
        """Accept the drag action if it contains file URLs."""
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            super().dragEnterEvent(event)

    def dragMoveEvent(self, event):
        if event.mimeData().hasUrls():
            event.acceptProposedAction()
        else:
            super().dragMoveEvent(event)

    def dropEvent(self, event):
        # only the first local file counts; one job at a time
        for url in event.mimeData().urls():
            if url.isLocalFile() and (p := Path(url.toLocalFile())).is_file():
                self.pathDropped.emit(str(p))
                event.acceptProposedAction()
                return
        super().dropEvent(event)
