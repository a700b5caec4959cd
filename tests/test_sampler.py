from PIL import Image

from resizer.imaging.compositor import SourceImage, render, render_for_export
from resizer.imaging.sampler import pointer_to_pixel, rgb_to_hex, sample_color
from resizer.models.enums import BackgroundMode
from resizer.models.spec import TargetSpec

BG = TargetSpec(width=400, height=300, background_mode=BackgroundMode.COLOR,
                background_color="#1a2b3c")

def test_rgb_to_hex_pads_lowercase():
    assert rgb_to_hex(26, 43, 60) == "#1a2b3c"
    assert rgb_to_hex(0, 5, 255) == "#0005ff"

def test_pointer_mapping_accounts_for_density():
    # 400x300 logical canvas at 2x density, shown at its logical size
    assert pointer_to_pixel(10.6, 20.2, (800, 600), (400, 300)) == (21, 40)

def test_pointer_mapping_accounts_for_widget_scaling():
    # 800 px surface squeezed into a 200 px wide widget
    assert pointer_to_pixel(50, 50, (800, 600), (200, 150)) == (200, 200)

def test_pointer_mapping_clamps_to_surface():
    assert pointer_to_pixel(-5, 1000, (800, 600), (400, 300)) == (0, 599)
    assert pointer_to_pixel(400, 300, (800, 600), (400, 300)) == (799, 599)

def test_sample_at_fill_origin():
    surface = render_for_export(None, BG)
    assert sample_color(surface, 0, 0) == "#1a2b3c"

def test_sample_preview_edge_reads_canvas_not_boundary():
    surface = render(None, BG, pixel_density=1)
    assert sample_color(surface, 0, 0) == "#1a2b3c"
    assert sample_color(surface, 399.5, 299.5) == "#1a2b3c"

def test_sample_on_high_density_preview():
    surface = render(None, BG, pixel_density=2)
    assert sample_color(surface, 200, 150) == "#1a2b3c"

def test_sample_reads_image_pixels():
    src = SourceImage(Image.new("RGBA", (100, 100), (200, 100, 50, 255)))
    surface = render(src, TargetSpec(width=100, height=100), pixel_density=1.5)
    assert sample_color(surface, 50, 50) == "#c86432"

def test_sample_transparent_pixel_is_black():
    surface = render(None, TargetSpec(width=50, height=50), pixel_density=1)
    assert sample_color(surface, 25, 25) == "#000000"
