import logging
import re

logger = logging.getLogger(__name__)

FALLBACK_HSL = "210 100% 50%"

_HEX_RE = re.compile(r"^(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")


def hex_to_hsl(value: str) -> str:
    """Converts ``#rrggbb`` / ``#rgb`` to the ``"h s% l%"`` form used by CSS variables.

    Invalid input is logged and mapped to a default blue.
    """
    hex_value = (value or "").strip().lstrip("#")
    if not _HEX_RE.match(hex_value):
        logger.error("Invalid hex color: %r", value)
        return FALLBACK_HSL

    if len(hex_value) == 3:
        hex_value = "".join(ch * 2 for ch in hex_value)
    r, g, b = (int(hex_value[i:i + 2], 16) / 255 for i in (0, 2, 4))

    high = max(r, g, b)
    low = min(r, g, b)
    lightness = (high + low) / 2
    hue = 0.0
    saturation = 0.0

    if high != low:
        delta = high - low
        saturation = delta / (2 - high - low) if lightness > 0.5 else delta / (high + low)
        if high == r:
            hue = (g - b) / delta + (6 if g < b else 0)
        elif high == g:
            hue = (b - r) / delta + 2
        else:
            hue = (r - g) / delta + 4
        hue = round(hue * 60) % 360

    return f"{int(hue)} {round(saturation * 100)}% {round(lightness * 100)}%"
