"""
Windows 3.1 style water-drop icon for the tray and the app window.
Run standalone to write icon.ico / icon.png, or import create_drop_icon().
"""
from __future__ import annotations

import math
import sys

from PIL import Image, ImageDraw

# Windows 3.1 16-color palette
BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)
TEAL = (0, 128, 128, 255)
DARK_TEAL = (0, 80, 80, 255)
LIGHT_CYAN = (128, 192, 192, 255)
GRAY = (128, 128, 128, 255)
# Greyed-out variant while reminders are stopped
MUTED = {TEAL: (100, 110, 110, 255), DARK_TEAL: (70, 80, 80, 255),
         LIGHT_CYAN: (140, 150, 150, 255)}


def crosshatch_in_circle(draw, cx, cy, r, line_color, spacing, line_w=1):
    """Draw diagonal crosshatch lines clipped to a circle."""
    r_sq = r * r
    for sign in (1, -1):
        for offset in range(-2 * r, 2 * r + 1, spacing):
            pts = []
            for x in range(cx - r, cx + r + 1):
                y = sign * (x - cx) + cy + offset
                dx, dy = x - cx, y - cy
                if dx * dx + dy * dy <= r_sq:
                    pts.append((x, y))
            if len(pts) >= 2:
                draw.line([pts[0], pts[-1]], fill=line_color, width=line_w)


def _drop_outline(cx: int, cy: int, r: int, tip_y: int) -> list[tuple[int, int]]:
    """Polygon for a drop: circle of radius r at (cx, cy) with a tip straight above."""
    d = cy - tip_y
    phi = math.acos(min(1.0, r / d))
    pts = [(cx, tip_y)]
    # Walk the circle from the right tangent point round the bottom to the left one
    for i in range(49):
        a = -math.pi / 2 + phi + i * (2 * math.pi - 2 * phi) / 48
        pts.append((int(round(cx + r * math.cos(a))), int(round(cy + r * math.sin(a)))))
    return pts


def create_drop_icon(size: int = 64, inactive: bool = False) -> Image.Image:
    """Create a single drop icon, designed at 64px and scaled."""
    teal, dark, light = TEAL, DARK_TEAL, LIGHT_CYAN
    if inactive:
        teal, dark, light = MUTED[TEAL], MUTED[DARK_TEAL], MUTED[LIGHT_CYAN]

    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(img)
    s = size / 64
    w = max(1, int(s))

    cx, cy = int(32 * s), int(40 * s)
    r = int(19 * s)
    tip_y = int(5 * s)

    # ── Shadow, outline, body ──
    draw.polygon([(x + w, y + w) for x, y in _drop_outline(cx, cy, r, tip_y)], fill=GRAY)
    draw.polygon(_drop_outline(cx, cy, r, tip_y), fill=BLACK)
    rim = max(1, int(1.5 * s))
    draw.polygon(_drop_outline(cx, cy, r - rim, tip_y + 2 * rim), fill=teal)

    # ── Crosshatch shading on the round part ──
    crosshatch_in_circle(draw, cx, cy, r - 3 * rim, dark, max(3, int(4 * s)), w)

    # ── 3D bevel: highlight upper-left, shadow lower-right ──
    for angle_deg in range(200, 260):
        a = math.radians(angle_deg)
        for offset in range(1, max(2, int(2.5 * s)) + 1):
            br = r - rim - offset
            draw.point((int(cx + br * math.cos(a)), int(cy + br * math.sin(a))), fill=light)
    for angle_deg in range(20, 120):
        a = math.radians(angle_deg)
        for offset in range(1, max(2, int(2.5 * s)) + 1):
            br = r - rim - offset
            draw.point((int(cx + br * math.cos(a)), int(cy + br * math.sin(a))), fill=dark)

    # ── Glint ──
    gr = max(2, int(4 * s))
    gx, gy = cx - int(8 * s), cy - int(6 * s)
    draw.ellipse([gx - gr, gy - gr, gx + gr, gy + gr], fill=WHITE, outline=BLACK, width=w)

    return img


def generate_icon(ico_path: str = "icon.ico", png_path: str = "icon.png") -> None:
    """Generate icon.ico and icon.png files."""
    sizes = [16, 32, 48, 64, 128, 256]
    images = [create_drop_icon(sz) for sz in sizes]
    # PIL wants the largest ICO frame first
    images[-1].save(ico_path, format="ICO", append_images=images[:-1])
    images[-1].save(png_path, format="PNG")


if __name__ == "__main__":
    generate_icon()
    if "--preview" in sys.argv:
        create_drop_icon(512).save("icon_preview.png", format="PNG")
    print("Generated icon.ico and icon.png")
