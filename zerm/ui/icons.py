from __future__ import annotations

from PIL import Image, ImageDraw

# Stream Deck keys are 72x72; the tray scales whatever it gets.
ICON_SIZE = 72


def make_icon(visual_index: int, size: int = ICON_SIZE) -> Image.Image:
    """
    Monochrome ring with an inner dot.
    visual_index 0 → solid dot (active), 1 → faded dot.
    """
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)

    pad = size // 4
    d.ellipse((pad, pad, size - pad, size - pad), outline=(255, 255, 255, 220), width=max(1, size // 20))

    alpha = 255 if visual_index == 0 else 80
    c = size // 2
    r = max(2, size // 12)
    d.ellipse((c - r, c - r, c + r, c + r), fill=(255, 255, 255, alpha))
    return img
