"""Unit tests for file classification and output naming."""
import pytest
from compressio.models.job import Category
from compressio.utils.paths import classify, compressed_output_path, type_label, unique_path


@pytest.mark.parametrize("name", ["a.jpg", "a.JPEG", "a.png", "a.webp", "a.bmp", "a.TIFF"])
def test_classify_images(name):
    assert classify(f"/media/{name}") is Category.IMAGE


@pytest.mark.parametrize("name", ["report.docx", "a.doc", "a.PDF", "notes.txt", "a.rtf"])
def test_classify_documents(name):
    assert classify(f"/media/{name}") is Category.UNSUPPORTED_DOCUMENT


@pytest.mark.parametrize("name", ["clip.mp4", "clip.MKV", "clip.mov", "weird.xyz", "noext", "archive.tar.gz", ""])
def test_classify_falls_back_to_video(name):
    assert classify(name) is Category.VIDEO


def test_classify_uses_extension_not_directory():
    assert classify("/photos.jpg/clip.avi") is Category.VIDEO


def test_type_label():
    assert type_label("x.png") == "IMG"
    assert type_label("x.pdf") == "PDF"
    assert type_label("x.docx") == "DOC"
    assert type_label("x.mkv") == "VID"


def test_compressed_output_path_next_to_source(tmp_path):
    out = compressed_output_path(tmp_path / "holiday.MP4")
    assert out == tmp_path / "holiday_compressed.mp4"


def test_compressed_output_path_custom_suffix(tmp_path):
    assert compressed_output_path(tmp_path / "a.png", "_small").name == "a_small.png"


def test_output_path_never_overwrites(tmp_path):
    (tmp_path / "a_compressed.png").write_bytes(b"x")
    (tmp_path / "a_compressed_001.png").write_bytes(b"x")
    assert compressed_output_path(tmp_path / "a.png").name == "a_compressed_002.png"


def test_unique_path_returns_base_when_free(tmp_path):
    assert unique_path(tmp_path / "free.mp4") == tmp_path / "free.mp4"
