from pathlib import Path
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont, ImageOps

BACKGROUND = (255, 255, 255)
TEXT_COLOR = (0, 0, 0)
LABEL_POINTSIZE = 18


def fit_square(im: Image.Image, size: int) -> Image.Image:
    """Scale to fill a size x size square, keeping aspect ratio, then crop from the center."""
    im = im.convert("RGB")
    return ImageOps.fit(im, (size, size), method=Image.Resampling.LANCZOS)


def blank_tile(size: int) -> Image.Image:
    return Image.new("RGB", (size, size), BACKGROUND)


def text_tile(text: str, size: int) -> Image.Image:
    """White tile with `text` (may contain newlines) centered."""
    im = blank_tile(size)
    draw = ImageDraw.Draw(im)
    font = ImageFont.load_default(size=LABEL_POINTSIZE)
    draw.multiline_text(
        (size / 2, size / 2),
        text,
        fill=TEXT_COLOR,
        font=font,
        anchor="mm",
        align="center",
    )
    return im


def compose_grid(
    paths: Sequence[Path], cols: int, rows: int, tile_size: int
) -> Image.Image:
    """
    Place tiles left-to-right, top-to-bottom with no spacing. Cells without a
    tile stay transparent.
    """
    canvas = Image.new("RGBA", (cols * tile_size, rows * tile_size), (0, 0, 0, 0))
    for idx, path in enumerate(paths[: cols * rows]):
        row = idx // cols
        col = idx % cols
        with Image.open(path) as src:
            canvas.paste(fit_square(src, tile_size), (col * tile_size, row * tile_size))
    return canvas
