from pathlib import Path

from resizer.imaging.naming import export_filename, format_extension, write_export
from resizer.models.enums import ExportFormat

def test_export_filename_basic():
    assert export_filename("photo.heic", 800, 420, ExportFormat.PNG) == "photo-800x420.png"

def test_export_filename_extensions():
    assert export_filename("a.png", 10, 20, ExportFormat.JPEG) == "a-10x20.jpg"
    assert export_filename("a.png", 10, 20, "image/webp") == "a-10x20.webp"
    assert export_filename("a.png", 10, 20, "image/gif") == "a-10x20.img"

def test_export_filename_base_name_fallbacks():
    assert export_filename(None, 1, 2, ExportFormat.PNG) == "image-1x2.png"
    assert export_filename("", 1, 2, ExportFormat.PNG) == "image-1x2.png"
    assert export_filename(".png", 1, 2, ExportFormat.PNG) == "image-1x2.png"
    assert export_filename("archive.tar.gz", 1, 2, ExportFormat.PNG) == "archive.tar-1x2.png"
    assert export_filename("README", 1, 2, ExportFormat.PNG) == "README-1x2.png"

def test_format_extension():
    assert format_extension(ExportFormat.PNG) == "png"
    assert format_extension("image/jpg") == "jpg"
    assert format_extension(None) == "img"
    assert format_extension("image/bmp") == "img"

def test_write_export_never_overwrites(tmp_path: Path):
    out_dir = tmp_path / "exports"
    first = write_export(b"one", "photo-10x10.png", out_dir)
    second = write_export(b"two", "photo-10x10.png", out_dir)
    assert first.name == "photo-10x10.png"
    assert second.name == "photo-10x10-1.png"
    assert first.read_bytes() == b"one"
    assert second.read_bytes() == b"two"
