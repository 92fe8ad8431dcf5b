import colorsys
import re

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field


_HSL_PATTERN = re.compile(
    r"^hsl\(\s*(-?[\d.]+)\s*,\s*([\d.]+)%\s*,\s*([\d.]+)%\s*\)$", re.IGNORECASE
)
_HEX_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)


def _fmt(value: float) -> str:
    return f"{round(value, 2):g}"


class HSLColor(BaseModel):
    """Color with an addressable lightness channel (hue in degrees, s/l in percent)."""

    model_config = ConfigDict(frozen=True)

    hue: float
    saturation: float = Field(ge=0, le=100)
    lightness: float = Field(ge=0, le=100)

    def shade(self, delta: float) -> "HSLColor":
        lightness = min(100.0, max(0.0, self.lightness + delta))
        return self.model_copy(update={"lightness": lightness})

    def to_svg(self) -> str:
        return f"hsl({_fmt(self.hue)}, {_fmt(self.saturation)}%, {_fmt(self.lightness)}%)"


class OpaqueColor(BaseModel):
    """Color token that cannot be shaded (named colors, `none`, `transparent`...)."""

    model_config = ConfigDict(frozen=True)

    token: str

    def to_svg(self) -> str:
        return self.token


Color = HSLColor | OpaqueColor


def parse_color(raw: str) -> Color:
    """Parse `hsl(...)` and `#rgb`/`#rrggbb` strings; anything else stays opaque."""

    value = raw.strip()
    match = _HSL_PATTERN.match(value)
    if match:
        hue, saturation, lightness = (float(part) for part in match.groups())
        return HSLColor(
            hue=hue,
            saturation=min(saturation, 100.0),
            lightness=min(lightness, 100.0),
        )

    match = _HEX_PATTERN.match(value)
    if match:
        digits = match.group(1)
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        red, green, blue = (int(digits[i : i + 2], 16) / 255 for i in (0, 2, 4))
        hue, lightness, saturation = colorsys.rgb_to_hls(red, green, blue)
        return HSLColor(
            hue=hue * 360, saturation=saturation * 100, lightness=lightness * 100
        )

    return OpaqueColor(token=value)


def shade(color: Color, delta: float) -> Color:
    """Shift lightness by `delta`, clamped to [0, 100]; opaque colors pass through."""

    if isinstance(color, HSLColor):
        return color.shade(delta)
    return color
