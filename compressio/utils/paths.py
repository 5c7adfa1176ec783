# compressio/utils/paths.py
from pathlib import Path

from ..models.job import Category

IMAGE_EXTS = frozenset({".jpg", ".jpeg", ".png", ".webp", ".bmp", ".tiff"})
PDF_EXTS = frozenset({".pdf"})
DOCUMENT_EXTS = PDF_EXTS | {".doc", ".docx", ".txt", ".rtf"}

MEDIA_FILTER = "Media (*.jpg *.png *.mp4 *.mkv *.avi *.mov *.pdf);;All files (*)"


def _ext(path) -> str:
    return Path(str(path)).suffix.lower()


def classify(path) -> Category:
    """Category of a file from its extension; anything unrecognised is video."""
    ext = _ext(path)
    if ext in IMAGE_EXTS:
        return Category.IMAGE
    if ext in DOCUMENT_EXTS:
        return Category.UNSUPPORTED_DOCUMENT
    return Category.VIDEO


def type_label(path) -> str:
    ext = _ext(path)
    if ext in IMAGE_EXTS: return "IMG"
    if ext in PDF_EXTS: return "PDF"
    if ext in DOCUMENT_EXTS: return "DOC"
    return "VID"


def unique_path(base: Path) -> Path:
    if not base.exists():
        return base
    n = 1
    while True:
        candidate = base.with_name(f"{base.stem}_{n:03d}{base.suffix}")
        if not candidate.exists():
            return candidate
        n += 1


def compressed_output_path(source, suffix: str = "_compressed") -> Path:
    src = Path(source)
    return unique_path(src.with_name(f"{src.stem}{suffix}{src.suffix.lower()}"))
