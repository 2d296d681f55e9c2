"""QR code image rendering with an adaptively sized caption

Functions:
    encode_matrix(payload_text, error_correction='H') -> ModuleGrid
        Encode text into a square QR module grid (no quiet zone).
    fit_caption(caption_text, image_side_px, settings=None) -> CaptionLayout
        Size the caption so that it fits the center of the image.
    caption_for(short_url) -> str
        Caption text for a short URL (scheme stripped).
    render(payload_text, caption_text, settings=None) -> CodeImageModel
        Encode the payload and lay out the caption.

Rendering is pure: the same payload, caption and settings always produce the
same model, and therefore byte-identical SVG.

Caption fitting:
    The caption width is estimated instead of measured, assuming an average
    glyph advance of 0.6 em:

        estimate  = len(caption) * font_size * 0.6 + 2 * padding
        max_width = 0.6 * image_side

    When the estimate overflows, the font is scaled by max_width / estimate,
    floored and clamped to the minimum size, and the estimate is recomputed
    once. A caption that still overflows at the minimum font size is drawn
    as is. The caption box hides the modules beneath it; error correction
    level H recovers up to ~30% of the codewords, which covers typical
    short URL captions.
"""

import math
import re
import logging
from dataclasses import dataclass

import qrcode
import qrcode.constants
import qrcode.exceptions

from kvshortener.exceptions import EncodingFailedError
from kvshortener.models import CodeImageModel
from kvshortener.settings import RendererSettings
from kvshortener.types import ModuleGrid
from kvshortener.services.constants import ENCODING_FAILED


logger = logging.getLogger(__name__)

ERROR_CORRECTION_LEVELS = {
    'L': qrcode.constants.ERROR_CORRECT_L,
    'M': qrcode.constants.ERROR_CORRECT_M,
    'Q': qrcode.constants.ERROR_CORRECT_Q,
    'H': qrcode.constants.ERROR_CORRECT_H,
}

_SCHEME_RE = re.compile(r'^https?://')


@dataclass(frozen=True)
class CaptionLayout:
    font_size_px: int
    width_px: float
    height_px: int


def encode_matrix(payload_text: str, error_correction: str = 'H') -> ModuleGrid:
    """Encode text as a QR code module grid

    Args:
        payload_text (str):
            Text to encode, typically the short URL.
        error_correction (str):
            Error correction level: 'L', 'M', 'Q' or 'H'.

    Returns:
        ModuleGrid: Square, row-major boolean grid, True for dark modules.

    Raises:
        EncodingFailedError:
            If the payload exceeds the largest QR version at this level.
    """
    qr = qrcode.QRCode(error_correction=ERROR_CORRECTION_LEVELS[error_correction], border=0)
    qr.add_data(payload_text)
    try:
        qr.make(fit=True)
    except (qrcode.exceptions.DataOverflowError, ValueError) as e:
        # qrcode 8 reports overflow as ValueError when fitting past version 40
        logger.error(
            'Payload too long for a QR code.',
            extra={'payloadLength': len(payload_text), 'errorCorrection': error_correction, 'event': ENCODING_FAILED},
        )
        raise EncodingFailedError(
            f'Payload of {len(payload_text)} characters exceeds QR capacity at error correction level {error_correction}.'
        ) from e

    return tuple(tuple(bool(module) for module in row) for row in qr.get_matrix())


def _estimate_width(length: int, font_size_px: int, settings: RendererSettings) -> float:
    return length * font_size_px * settings.glyph_width_ratio + 2 * settings.caption_padding_px


def fit_caption(caption_text: str, image_side_px: int, settings: RendererSettings | None = None) -> CaptionLayout:
    """Pick the caption font size and box for an image of the given side

    Example:
        >>> fit_caption('sho.rt/abc123', 370).font_size_px
        27
    """
    settings = settings or RendererSettings()

    font_size = settings.font_size_px
    estimate = _estimate_width(len(caption_text), font_size, settings)
    max_width = settings.caption_max_width_ratio * image_side_px

    if estimate > max_width:
        font_size = max(settings.min_font_size_px, math.floor(font_size * (max_width / estimate)))
        # Single correction pass: the result may still overflow at the minimum size
        estimate = _estimate_width(len(caption_text), font_size, settings)

    return CaptionLayout(
        font_size_px=font_size,
        width_px=estimate,
        height_px=font_size + 2 * settings.caption_padding_px,
    )


def caption_for(short_url: str) -> str:
    """Strip the http(s) scheme from a short URL for display."""
    return _SCHEME_RE.sub('', short_url)


def render(payload_text: str, caption_text: str, settings: RendererSettings | None = None) -> CodeImageModel:
    """Render a QR code image for payload_text with caption_text on top

    Args:
        payload_text (str):
            Text embedded in the QR code.
        caption_text (str):
            Text drawn over the center of the code.
        settings (RendererSettings | None):
            Geometry and font settings. Defaults to RendererSettings().

    Returns:
        CodeImageModel: call `to_svg()` for the SVG document.

    Raises:
        EncodingFailedError:
            If payload_text can't be encoded at the configured level.

    Example:
        >>> image = render('https://sho.rt/abc123', 'sho.rt/abc123')
        >>> image.image_side_px
        370
        >>> image.caption_font_size_px
        27
    """
    settings = settings or RendererSettings()

    modules = encode_matrix(payload_text, settings.error_correction)
    size = len(modules)
    image_side_px = (size + 2 * settings.margin_cells) * settings.cell_size_px
    caption = fit_caption(caption_text, image_side_px, settings)

    return CodeImageModel(
        matrix_size=size,
        cell_size_px=settings.cell_size_px,
        margin_cells=settings.margin_cells,
        modules=modules,
        caption_text=caption_text,
        caption_font_size_px=caption.font_size_px,
        caption_width_px=caption.width_px,
        caption_height_px=caption.height_px,
    )
