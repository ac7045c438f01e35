# media/processing.py
# Preview derivation: watermarked JPEG thumbnails for images and a static
# placeholder card for videos. Originals are never modified.

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont, ImageOps

logger = logging.getLogger(__name__)

PREVIEW_SIZE = (800, 600)
PREVIEW_QUALITY = 80
WATERMARK_TILE = (200, 100)
WATERMARK_FILL = (255, 255, 255, 77)  # white at ~30% opacity


def _load_font(size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    try:
        return ImageFont.truetype("DejaVuSans-Bold.ttf", size)
    except OSError:
        return ImageFont.load_default()


def _watermark_layer(size: tuple[int, int], text: str) -> Image.Image:
    """Transparent layer covered with the watermark text, tiled diagonally."""
    layer = Image.new("RGBA", size, (0, 0, 0, 0))

    tile = Image.new("RGBA", WATERMARK_TILE, (0, 0, 0, 0))
    ImageDraw.Draw(tile).text((0, 20), text, font=_load_font(14), fill=WATERMARK_FILL)
    tile = tile.rotate(45, expand=True)

    for y in range(0, size[1], tile.height // 2):
        for x in range(0, size[0], tile.width // 2):
            layer.alpha_composite(tile, (x, y))
    return layer


def generate_thumbnail(
    input_path: str | Path,
    output_path: str | Path,
    width: int = PREVIEW_SIZE[0],
    height: int = PREVIEW_SIZE[1],
    quality: int = PREVIEW_QUALITY,
    watermark_text: str = "© Portfolio Preview",
) -> bool:
    """
    Write a watermarked preview of an image.

    The image is scaled to fit inside width x height (never enlarged),
    overlaid with the tiled watermark and saved as JPEG.
    Returns False (and logs) if the image can't be processed.
    """
    try:
        with Image.open(input_path) as src:
            im = ImageOps.exif_transpose(src).convert("RGBA")
        im.thumbnail((width, height), Image.LANCZOS)
        out = Image.alpha_composite(im, _watermark_layer(im.size, watermark_text))

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        out.convert("RGB").save(output_path, "JPEG", quality=quality, optimize=True)
        return True
    except (OSError, ValueError, Image.DecompressionBombError) as e:
        logger.warning("Thumbnail generation failed for %s: %s", input_path, e)
        return False


def _draw_centered(draw: ImageDraw.ImageDraw, y: int, text: str, font, fill: str) -> None:
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    x = (PREVIEW_SIZE[0] - (right - left)) // 2
    draw.text((x, y), text, font=font, fill=fill)


def generate_video_thumbnail(
    output_path: str | Path,
    watermark_text: str = "© Portfolio Preview",
    quality: int = PREVIEW_QUALITY,
) -> bool:
    """
    Write the placeholder preview used for every video.

    No frame is extracted from the video itself.
    """
    try:
        w, h = PREVIEW_SIZE
        cx, cy = w // 2, h // 2
        im = Image.new("RGB", PREVIEW_SIZE, "#f3f4f6")
        draw = ImageDraw.Draw(im)
        draw.ellipse((cx - 60, cy - 60, cx + 60, cy + 60), fill="#6b7280")
        draw.polygon([(cx - 20, cy - 30), (cx - 20, cy + 30), (cx + 20, cy)], fill="white")
        _draw_centered(draw, cy + 70, "Video Preview", _load_font(16), "#374151")
        _draw_centered(draw, cy + 110, watermark_text, _load_font(12), "#9ca3af")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        im.save(output_path, "JPEG", quality=quality)
        return True
    except (OSError, ValueError) as e:
        logger.warning("Video placeholder generation failed for %s: %s", output_path, e)
        return False
