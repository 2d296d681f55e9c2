"""Unit tests for QR code rendering

Test coverage includes:

1. Encoding
   - Ensures payloads encode to square module grids.
   - Ensures oversized payloads raise EncodingFailedError.

2. Caption fitting
   - Ensures the default font is kept when the caption fits.
   - Ensures long captions shrink, never below the minimum font size.
   - Ensures the font size never grows with caption length.

3. Rendering
   - Ensures image geometry follows matrix size, margin and cell size.
   - Ensures rendering is deterministic and SVG output is self-contained.
"""

import pytest
import qrcode

from kvshortener.exceptions import EncodingFailedError
from kvshortener.services import CaptionLayout, caption_for, encode_matrix, fit_caption, render
from kvshortener.settings import RendererSettings


SHORT_URL = 'https://sho.rt/abc123'


# -------------------------------
# 1. Encoding
# -------------------------------


def test_encode_matrix_is_square():
    modules = encode_matrix(SHORT_URL)

    # 21 bytes at level H need version 3
    assert len(modules) == 29
    assert all(len(row) == 29 for row in modules)
    assert all(isinstance(cell, bool) for row in modules for cell in row)


def test_encode_matrix_has_finder_pattern():
    modules = encode_matrix(SHORT_URL)

    # top-left finder pattern: dark 7x7 border
    assert all(modules[0][:7])
    assert all(modules[6][:7])
    assert not any(modules[1][1:6])


def test_encode_matrix_lower_error_correction_is_not_larger():
    assert len(encode_matrix(SHORT_URL, 'L')) <= len(encode_matrix(SHORT_URL, 'H'))


def test_encode_matrix_payload_too_long():
    with pytest.raises(EncodingFailedError) as exc_info:
        encode_matrix('x' * 3000)

    assert exc_info.value.error_code == 'renderer:encoding_failed_error'


def test_render_payload_too_long():
    with pytest.raises(EncodingFailedError):
        render('x' * 3000, 'caption')


def test_encode_matrix_value_error_on_overflow(monkeypatch):
    # qrcode 8 rejects the out-of-range version with ValueError while fitting
    def make(self, fit=True):
        raise ValueError('Invalid version (was 41, expected 1 to 40)')

    monkeypatch.setattr(qrcode.QRCode, 'make', make)

    with pytest.raises(EncodingFailedError) as exc_info:
        encode_matrix(SHORT_URL)

    assert isinstance(exc_info.value.__cause__, ValueError)


# -------------------------------
# 2. Caption fitting
# -------------------------------


def test_fit_caption_keeps_default_font_when_it_fits():
    layout = fit_caption('a.b/c', 370)

    assert layout == CaptionLayout(font_size_px=32, width_px=5 * 32 * 0.6 + 8, height_px=40)


def test_fit_caption_shrinks_long_caption():
    layout = fit_caption('sho.rt/abc123', 370)

    assert layout.font_size_px == 27
    assert layout.width_px == pytest.approx(13 * 27 * 0.6 + 8)
    assert layout.width_px <= 0.6 * 370
    assert layout.height_px == 35


def test_fit_caption_clamps_to_minimum_font_size():
    layout = fit_caption('x' * 100, 370)

    assert layout.font_size_px == 12
    # still wider than the image allows, drawn anyway
    assert layout.width_px == pytest.approx(100 * 12 * 0.6 + 8)
    assert layout.width_px > 0.6 * 370


def test_fit_caption_is_monotonic_in_length():
    sizes = [fit_caption('x' * n, 370).font_size_px for n in range(1, 80)]

    assert sizes == sorted(sizes, reverse=True)
    assert min(sizes) >= 12
    assert max(sizes) == 32


def test_fit_caption_respects_settings():
    settings = RendererSettings(font_size_px=20, min_font_size_px=8, caption_padding_px=0)

    assert fit_caption('x', 100, settings) == CaptionLayout(font_size_px=20, width_px=12.0, height_px=20)
    assert fit_caption('x' * 50, 100, settings).font_size_px == 8


@pytest.mark.parametrize(
    'short_url, caption',
    [
        ('https://sho.rt/abc123', 'sho.rt/abc123'),
        ('http://localhost:3000/foo', 'localhost:3000/foo'),
        ('sho.rt/abc123', 'sho.rt/abc123'),
        ('ftp://sho.rt/x', 'ftp://sho.rt/x'),
    ],
)
def test_caption_for(short_url, caption):
    assert caption_for(short_url) == caption


# -------------------------------
# 3. Rendering
# -------------------------------


def test_render_geometry():
    image = render(SHORT_URL, caption_for(SHORT_URL))

    assert image.matrix_size == 29
    assert image.image_side_px == (29 + 2 * 4) * 10 == 370
    assert image.caption_text == 'sho.rt/abc123'
    assert image.caption_font_size_px == 27


def test_render_custom_geometry():
    image = render(SHORT_URL, 'x', RendererSettings(cell_size_px=4, margin_cells=0))

    assert image.image_side_px == 29 * 4
    assert image.path_data().startswith('M0,0h4v4h-4z')


def test_render_is_deterministic():
    first = render(SHORT_URL, 'sho.rt/abc123').to_svg()
    second = render(SHORT_URL, 'sho.rt/abc123').to_svg()

    assert first == second


def test_render_svg_document():
    svg = render(SHORT_URL, 'sho.rt/abc123').to_svg()

    assert svg.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<svg width="370" height="370" viewBox="0 0 370 370"')
    assert svg.endswith('</svg>')
    assert svg.count('<path ') == 1
    assert 'font-size="27"' in svg
    assert '>sho.rt/abc123</text>' in svg
    assert 'href' not in svg


def test_render_escapes_caption():
    svg = render(SHORT_URL, '<b>&"x"</b>').to_svg()

    assert '&lt;b&gt;&amp;"x"&lt;/b&gt;</text>' in svg
    assert '<b>' not in svg
