from types import MappingProxyType

from pydantic import BaseModel
from pydantic import ConfigDict


SNAKE_PALETTES = MappingProxyType(
    {
        "github": ("#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"),
        "github-dark": ("#161b22", "#0e4429", "#006d32", "#26a641", "#39d353"),
        "github-light": ("#ebedf0", "#9be9a8", "#40c463", "#30a14e", "#216e39"),
    }
)
DEFAULT_SNAKE_PALETTE = "github"


class ProfileTheme(BaseModel):
    """Colors of the isometric profile card.

    A theme without `palette` colors blocks by a rainbow hue over the week
    position; otherwise blocks take the palette entry for their level.
    """

    model_config = ConfigDict(frozen=True)

    background: str
    text: str
    grid: str
    accent: str
    empty: str
    palette: tuple[str, ...] | None = None
    hue_range: float = 300.0
    saturation: float = 70.0
    min_lightness: float = 25.0
    lightness_span: float = 35.0


PROFILE_THEMES = MappingProxyType(
    {
        "night-rainbow": ProfileTheme(
            background="#0d1117",
            text="#8b949e",
            grid="#30363d",
            accent="#58a6ff",
            empty="#161b22",
        ),
        "night-green": ProfileTheme(
            background="#0d1117",
            text="#8b949e",
            grid="#30363d",
            accent="#39d353",
            empty="#161b22",
            palette=SNAKE_PALETTES["github-dark"],
        ),
        "green": ProfileTheme(
            background="#ffffff",
            text="#57606a",
            grid="#d0d7de",
            accent="#0969da",
            empty="#ebedf0",
            palette=SNAKE_PALETTES["github"],
        ),
    }
)
DEFAULT_PROFILE_THEME = "night-rainbow"


class TrophyTheme(BaseModel):
    model_config = ConfigDict(frozen=True)

    bg: str
    title: str
    text: str
    icon: str
    s_base: str
    s_text: str
    a_base: str
    a_text: str
    b_base: str
    b_text: str
    def_base: str
    def_text: str
    laurel: str
    bar: str


def _trophy_theme(*colors: str) -> TrophyTheme:
    keys = (
        "bg", "title", "text", "icon", "s_base", "s_text", "a_base", "a_text",
        "b_base", "b_text", "def_base", "def_text", "laurel", "bar",
    )
    return TrophyTheme(**dict(zip(keys, colors, strict=True)))


TROPHY_THEMES = MappingProxyType(
    {
        "darkhub": _trophy_theme(
            "#24292f", "#FFFFFF", "#A0A0A0", "#3D3D3D", "#FFD700", "#000",
            "#C0C0C0", "#000", "#CD7F32", "#FFF", "#4A4A4A", "#FFF", "#FFD700", "#3D3D3D",
        ),
        "onedark": _trophy_theme(
            "#282C34", "#E5C07B", "#ABB2BF", "#3D3D3D", "#E5C07B", "#282C34",
            "#98C379", "#282C34", "#61AFEF", "#282C34", "#4B5263", "#ABB2BF", "#E5C07B", "#3D3D3D",
        ),
        "gruvbox": _trophy_theme(
            "#282828", "#FABD2F", "#EBDBB2", "#3C3836", "#FABD2F", "#282828",
            "#B8BB26", "#282828", "#FE8019", "#282828", "#504945", "#EBDBB2", "#FABD2F", "#3C3836",
        ),
        "dracula": _trophy_theme(
            "#282A36", "#F8F8F2", "#6272A4", "#44475A", "#FFB86C", "#282A36",
            "#50FA7B", "#282A36", "#FF79C6", "#282A36", "#44475A", "#F8F8F2", "#FFB86C", "#44475A",
        ),
        "monokai": _trophy_theme(
            "#272822", "#F8F8F2", "#75715E", "#3E3D32", "#E6DB74", "#272822",
            "#A6E22E", "#272822", "#FD971F", "#272822", "#49483E", "#F8F8F2", "#E6DB74", "#3E3D32",
        ),
        "nord": _trophy_theme(
            "#2E3440", "#ECEFF4", "#D8DEE9", "#3B4252", "#EBCB8B", "#2E3440",
            "#A3BE8C", "#2E3440", "#D08770", "#2E3440", "#4C566A", "#ECEFF4", "#EBCB8B", "#3B4252",
        ),
        "tokyonight": _trophy_theme(
            "#1A1B26", "#C0CAF5", "#565F89", "#24283B", "#E0AF68", "#1A1B26",
            "#9ECE6A", "#1A1B26", "#F7768E", "#1A1B26", "#414868", "#C0CAF5", "#E0AF68", "#24283B",
        ),
        "radical": _trophy_theme(
            "#141321", "#FE428E", "#A9FEF7", "#1D1B2E", "#FE428E", "#141321",
            "#F8D847", "#141321", "#A9FEF7", "#141321", "#2D2B40", "#A9FEF7", "#FE428E", "#1D1B2E",
        ),
    }
)
DEFAULT_TROPHY_THEME = "darkhub"
