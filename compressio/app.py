# compressio/app.py
import logging
import sys

from PySide6.QtWidgets import QApplication

from .main_window import MainWindow
from .utils.settings import load_settings


def main() -> int:
    settings = load_settings()
    logging.basicConfig(
        level=getattr(logging, str(settings.get("log_level", "INFO")).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    app = QApplication(sys.argv)
    app.setApplicationName("Compress I/O")
    win = MainWindow(settings)
    win.show()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
