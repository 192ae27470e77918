"""
Company logo to ASCII art.
"""

from __future__ import annotations

import io
import logging
from typing import TYPE_CHECKING, Optional

from PIL import Image

if TYPE_CHECKING:
    from boardscout.fetchers.http import HttpFetcher

logger = logging.getLogger(__name__)

# Dark to light
CHAR_RAMP = "@%#*+=-:. "


def image_to_ascii(data: bytes, width: int = 40, colored: bool = False) -> Optional[str]:
    """
    Render image bytes as text, ``width`` characters per row.

    Rows are sampled at half the horizontal density since terminal cells
    are roughly twice as tall as they are wide.
    """
    with Image.open(io.BytesIO(data)) as img:
        img = img.convert("RGBA")
        # Transparent pixels render as background
        background = Image.new("RGBA", img.size, (255, 255, 255, 255))
        rgb = Image.alpha_composite(background, img).convert("RGB")

    height = max(1, round(rgb.height / rgb.width * width / 2))
    rgb = rgb.resize((width, height))
    gray = rgb.convert("L")

    scale = (len(CHAR_RAMP) - 1) / 255
    rows = []
    for y in range(height):
        chars = []
        for x in range(width):
            ch = CHAR_RAMP[round(gray.getpixel((x, y)) * scale)]
            if colored:
                r, g, b = rgb.getpixel((x, y))
                ch = f"\x1b[38;2;{r};{g};{b}m{ch}\x1b[0m"
            chars.append(ch)
        rows.append("".join(chars).rstrip() if not colored else "".join(chars))

    text = "\n".join(rows).strip("\n")
    return text if text.strip() else None


async def convert_image_url_to_ascii(
    fetcher: "HttpFetcher",
    url: str,
    width: int = 40,
    colored: bool = False,
) -> Optional[str]:
    """Download an image and render it as ASCII. Returns None on any failure."""
    result = await fetcher.fetch_bytes(url)
    if not result.ok:
        logger.warning("Could not download logo %s (%s)", url, result.error or result.status)
        return None

    try:
        return image_to_ascii(result.body, width=width, colored=colored)
    except (Image.DecompressionBombError, OSError, ValueError) as e:
        logger.warning("Could not convert logo %s to ASCII (%s)", url, e)
        return None
