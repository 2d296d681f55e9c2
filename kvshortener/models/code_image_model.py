"""Value object describing a rendered QR code image

The model holds everything needed to draw the image (module grid, geometry
and the fitted caption box) and serialises itself to a self-contained SVG
document with `to_svg()`. All coordinates are absolute pixels.

Layout (image side = (matrix_size + 2 * margin_cells) * cell_size_px):

    +-------------------------+
    |  margin                 |
    |    ##  #  ####  #       |
    |    # +-------------+    |
    |    # | example.com |    |  <- white caption box, centered
    |    # +-------------+    |
    |    ##  #  ## #  ##      |
    |                 margin  |
    +-------------------------+
"""

from dataclasses import dataclass
from xml.sax.saxutils import escape, quoteattr

from kvshortener.types import ModuleGrid


def _fmt(value: float) -> str:
    """Format a pixel value compactly and deterministically (at most 2 decimals)."""
    if float(value).is_integer():
        return str(int(value))
    return f'{value:.2f}'.rstrip('0').rstrip('.')


@dataclass(frozen=True)
class CodeImageModel:
    """Represent a QR code image with a centered caption.

    Attributes:
        matrix_size (int):
            Side of the QR module grid, in modules.
        cell_size_px (int):
            Side of one module, in pixels.
        margin_cells (int):
            Quiet zone around the grid on each side, in modules.
        modules (ModuleGrid):
            Row-major boolean grid, True for dark modules.
        caption_text (str):
            Human readable caption drawn over the center of the code.
        caption_font_size_px (int):
            Fitted caption font size.
        caption_width_px (float):
            Estimated caption box width, padding included.
        caption_height_px (int):
            Caption box height, padding included.
    """

    matrix_size: int
    cell_size_px: int
    margin_cells: int
    modules: ModuleGrid
    caption_text: str
    caption_font_size_px: int
    caption_width_px: float
    caption_height_px: int

    @property
    def image_side_px(self) -> int:
        return (self.matrix_size + 2 * self.margin_cells) * self.cell_size_px

    @property
    def center_px(self) -> float:
        return self.image_side_px / 2

    def path_data(self) -> str:
        """Return SVG path data with one closed square per dark module."""
        cell = self.cell_size_px
        parts = []
        for r, row in enumerate(self.modules):
            for c, dark in enumerate(row):
                if dark:
                    x = (c + self.margin_cells) * cell
                    y = (r + self.margin_cells) * cell
                    parts.append(f'M{x},{y}h{cell}v{cell}h-{cell}z')
        return ''.join(parts)

    def to_svg(self) -> str:
        """Serialise the image to an SVG document

        Returns:
            str: SVG markup with a white background, a single black path for the
                 modules, a white caption box and the black caption text.

        Example:
            >>> image = render('https://sho.rt/abc123', 'sho.rt/abc123')
            >>> image.to_svg().startswith('<?xml')
            True
        """
        side = _fmt(self.image_side_px)
        center = self.center_px
        box_x = center - self.caption_width_px / 2
        box_y = center - self.caption_height_px / 2

        # fmt: off
        return (
            '<?xml version="1.0" encoding="UTF-8"?>\n'
            f'<svg width="{side}" height="{side}" viewBox="0 0 {side} {side}" xmlns="http://www.w3.org/2000/svg">\n'
            f'  <rect width="{side}" height="{side}" fill="white"/>\n'
            f'  <path d={quoteattr(self.path_data())} fill="black"/>\n'
            f'  <rect x="{_fmt(box_x)}" y="{_fmt(box_y)}" width="{_fmt(self.caption_width_px)}" '
            f'height="{_fmt(self.caption_height_px)}" fill="white"/>\n'
            f'  <text x="{_fmt(center)}" y="{_fmt(center)}" dy="5" font-family="Arial, sans-serif" '
            f'font-size="{self.caption_font_size_px}" text-anchor="middle" fill="black" font-weight="bold">'
            f'{escape(self.caption_text)}</text>\n'
            '</svg>'
        )
        # fmt: on
