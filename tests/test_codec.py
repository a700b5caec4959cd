import io
from pathlib import Path

from PIL import Image

from resizer.imaging.codec import decode_image, encode_surface, load_image_file
from resizer.imaging.compositor import SourceImage, render_for_export
from resizer.models.enums import BackgroundMode, ExportFormat
from resizer.models.spec import TargetSpec

def _png_bytes(size=(64, 32), color=(10, 200, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()

def _surface(**kw):
    src = SourceImage(Image.new("RGBA", (80, 40), (0, 128, 255, 255)))
    return render_for_export(src, TargetSpec(width=400, height=300, **kw))

def test_decode_png_bytes():
    src = decode_image(_png_bytes(), "photo.png")
    assert src is not None
    assert (src.natural_width, src.natural_height) == (64, 32)
    assert src.image.mode == "RGBA"
    assert src.name == "photo.png"

def test_decode_garbage_returns_none():
    assert decode_image(b"definitely not an image", "x.png") is None
    assert decode_image(b"", "empty.png") is None

def test_load_image_file(tmp_path: Path):
    p = tmp_path / "pic.png"
    p.write_bytes(_png_bytes((7, 9)))
    src = load_image_file(p)
    assert src.name == "pic.png" and src.natural_width == 7
    assert load_image_file(tmp_path / "missing.png") is None

def test_encode_png_keeps_size_and_alpha():
    data = encode_surface(_surface(), ExportFormat.PNG)
    with Image.open(io.BytesIO(data)) as im:
        assert im.format == "PNG"
        assert im.size == (400, 300)
        assert im.mode == "RGBA"
        # letterbox margin stays transparent
        assert im.getpixel((200, 10))[3] == 0

def test_encode_jpeg_flattens_onto_black():
    data = encode_surface(_surface(), ExportFormat.JPEG)
    with Image.open(io.BytesIO(data)) as im:
        assert im.format == "JPEG"
        assert im.size == (400, 300)
        r, g, b = im.convert("RGB").getpixel((200, 10))
        assert max(r, g, b) < 16

def test_encode_webp():
    data = encode_surface(_surface(background_mode=BackgroundMode.COLOR), ExportFormat.WEBP)
    with Image.open(io.BytesIO(data)) as im:
        assert im.format == "WEBP"
        assert im.size == (400, 300)

def test_quality_only_changes_lossy_output():
    surface = _surface(background_mode=BackgroundMode.COLOR)
    assert encode_surface(surface, ExportFormat.PNG, 0.1) == encode_surface(surface, ExportFormat.PNG)
    low = encode_surface(surface, ExportFormat.JPEG, 0.1)
    high = encode_surface(surface, ExportFormat.JPEG)
    assert low != high

def test_encoder_failure_returns_none(monkeypatch):
    def boom(self, *a, **kw):
        raise OSError("encoder unavailable")

    monkeypatch.setattr(Image.Image, "save", boom)
    assert encode_surface(_surface(), ExportFormat.PNG) is None
