"""Scorecard image generator: renders link health as a PNG."""

from __future__ import annotations

import os
from pathlib import Path

from .scoring import BAND_NAMES

# Render at 2x for high-DPI crispness
_SCALE = 2

DEFAULT_BADGE_PATH = "scorecard.png"

_BAND_COLORS = {
    "healthy": (110, 153, 112),   # sage green
    "drifting": (196, 164, 90),   # mustard
    "broken": (185, 110, 110),    # dusty rose
}


def _load_font(size: int, *, bold: bool = False, mono: bool = False):
    """Load a font with cross-platform fallback."""
    from PIL import ImageFont

    size = size * _SCALE
    if mono:
        candidates = [
            "/System/Library/Fonts/SFNSMono.ttf",
            "/usr/share/fonts/truetype/dejavu/DejaVuSansMono.ttf",
            "/usr/share/fonts/truetype/liberation/LiberationMono-Regular.ttf",
        ]
    elif bold:
        candidates = [
            "/System/Library/Fonts/SFCompact.ttf",
            "/System/Library/Fonts/HelveticaNeue.ttc",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        ]
    else:
        candidates = [
            "/System/Library/Fonts/SFCompact.ttf",
            "/System/Library/Fonts/HelveticaNeue.ttc",
            "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        ]
    for path in candidates:
        try:
            return ImageFont.truetype(path, size)
        except OSError:
            continue
    return ImageFont.load_default()


def _s(v: int | float) -> int:
    """Scale a layout value."""
    return int(v * _SCALE)


def _fit(text: str, limit: int) -> str:
    return text if len(text) <= limit else text[:limit - 1] + "…"


def generate_scorecard(health: dict, output_path: str | Path, title: str = "Component Link Health") -> Path:
    """Render a scorecard PNG from compute_health() output. Returns the output path."""
    from PIL import Image, ImageDraw

    output_path = Path(output_path)
    pct = health.get("pct", 100.0)
    band = health.get("band", "healthy")

    font_title = _load_font(18, bold=True)
    font_big = _load_font(48, bold=True)
    font_sub = _load_font(13)
    font_header = _load_font(11, mono=True)
    font_row = _load_font(12, mono=True)

    BG = (248, 241, 229)           # warm cream
    BG_TABLE = (241, 233, 219)
    TEXT = (62, 52, 42)
    DIM = (148, 132, 112)
    BORDER = (198, 182, 158)
    FRAME = (178, 158, 132)

    rows = sorted(health.get("by_page", {}).items())
    W = _s(440)
    pad = _s(24)
    table_top = _s(150)
    row_h = _s(22)
    table_h = _s(26) + max(len(rows), 1) * row_h + _s(10)
    H = table_top + table_h + _s(24)

    img = Image.new("RGB", (W, H), BG)
    draw = ImageDraw.Draw(img)

    draw.rectangle((0, 0, W - 1, H - 1), outline=FRAME, width=_s(2))
    inset = _s(6)
    draw.rectangle((inset, inset, W - 1 - inset, H - 1 - inset), outline=BORDER, width=1)

    tw = draw.textlength(title, font=font_title)
    draw.text(((W - tw) / 2, _s(18)), title, fill=TEXT, font=font_title)

    rule_margin = _s(60)
    rule_y = _s(44)
    draw.rectangle((rule_margin, rule_y, W - rule_margin, rule_y), fill=BORDER)

    score_str = f"{pct:.1f}%"
    sw = draw.textlength(score_str, font=font_big)
    draw.text(((W - sw) / 2, _s(52)), score_str, fill=_BAND_COLORS.get(band, TEXT), font=font_big)

    sub = (f"{BAND_NAMES.get(band, band)} · {health.get('linked', 0)} linked"
           f" · {health.get('detached', 0)} detached"
           f" · {health.get('broken_bindings', 0)} broken bindings")
    subw = draw.textlength(sub, font=font_sub)
    draw.text(((W - subw) / 2, _s(114)), sub, fill=DIM, font=font_sub)

    table_x1 = pad
    table_x2 = W - pad
    draw.rounded_rectangle(
        (table_x1, table_top - _s(2), table_x2, table_top + table_h),
        radius=_s(4), fill=BG_TABLE, outline=BORDER, width=1)

    col_name = table_x1 + _s(12)
    col_linked = _s(236)
    col_detached = _s(296)
    col_bindings = _s(366)
    header_y = table_top + _s(4)
    draw.text((col_name, header_y), "Page", fill=DIM, font=font_header)
    draw.text((col_linked, header_y), "Linked", fill=DIM, font=font_header)
    draw.text((col_detached, header_y), "Detach", fill=DIM, font=font_header)
    draw.text((col_bindings, header_y), "Vars", fill=DIM, font=font_header)

    line_y = header_y + _s(16)
    draw.rectangle((col_name, line_y, table_x2 - _s(12), line_y), fill=BORDER)

    y = line_y + _s(6)
    if not rows:
        draw.text((col_name, y), "No instances or bindings found", fill=DIM, font=font_row)
    for page_name, counts in rows:
        draw.text((col_name, y), _fit(page_name, 24), fill=TEXT, font=font_row)
        draw.text((col_linked, y), str(counts["linked"]), fill=TEXT, font=font_row)
        detached_color = _BAND_COLORS["broken"] if counts["detached"] else TEXT
        draw.text((col_detached, y), str(counts["detached"]), fill=detached_color, font=font_row)
        bindings_color = _BAND_COLORS["broken"] if counts["broken_bindings"] else TEXT
        draw.text((col_bindings, y), str(counts["broken_bindings"]), fill=bindings_color, font=font_row)
        y += row_h

    output_path.parent.mkdir(parents=True, exist_ok=True)
    img.save(str(output_path), "PNG", optimize=True)
    return output_path


def get_badge_path(args) -> Path:
    """Resolve the scorecard output path: CLI flag, then env var, then default."""
    path_str = (getattr(args, "output", None)
                or os.environ.get("COMPONENT_AUDIT_BADGE_PATH")
                or DEFAULT_BADGE_PATH)
    return Path(path_str)
