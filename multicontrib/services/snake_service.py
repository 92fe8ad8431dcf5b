from collections.abc import Sequence
from urllib.parse import parse_qs

from loguru import logger

from multicontrib.models import ContributionGrid
from multicontrib.models import PathStep
from multicontrib.services.drawing import new_drawing
from multicontrib.themes import DEFAULT_SNAKE_PALETTE
from multicontrib.themes import SNAKE_PALETTES


CELL_SIZE = 11
CELL_GAP = 3
PADDING = 10
SNAKE_LENGTH = 4
SNAKE_HEAD_COLOR = "#9be9a8"
SNAKE_BODY_COLOR = "#40c463"
DARK_BACKGROUND = "#0d1117"
DEFAULT_FRAME_DURATION_MS = 15


def parse_output_spec(entry: str) -> tuple[str, str]:
    """Split `path?palette=name` into the file path and palette name."""

    file_path, _, query = entry.strip().partition("?")
    params = parse_qs(query)
    palette = params.get("palette", [DEFAULT_SNAKE_PALETTE])[0]
    return file_path, palette


def resolve_palette(name: str) -> tuple[str, ...]:
    palette = SNAKE_PALETTES.get(name)
    if palette is None:
        logger.warning(f"Unknown palette {name!r}, using {DEFAULT_SNAKE_PALETTE!r}")
        return SNAKE_PALETTES[DEFAULT_SNAKE_PALETTE]
    return palette


def animation_duration_ms(step_count: int, frame_duration_ms: int) -> int:
    return step_count * frame_duration_ms


def _cell_origin(x: int, y: int) -> tuple[int, int]:
    return PADDING + x * (CELL_SIZE + CELL_GAP), PADDING + y * (CELL_SIZE + CELL_GAP)


def render_snake_svg(
    grid: ContributionGrid,
    path: Sequence[PathStep],
    palette: str = DEFAULT_SNAKE_PALETTE,
    dark: bool | None = None,
    frame_duration_ms: int = DEFAULT_FRAME_DURATION_MS,
) -> str:
    """Animated calendar where a short snake eats the active cells along `path`.

    Each eaten cell fades to the empty color at its eat time and comes back
    when the loop restarts. A palette name containing `dark` adds a dark
    background unless `dark` is given explicitly.
    """

    colors = resolve_palette(palette)
    if dark is None:
        dark = "dark" in palette

    width = grid.width * (CELL_SIZE + CELL_GAP) - CELL_GAP + PADDING * 2
    height = grid.height * (CELL_SIZE + CELL_GAP) - CELL_GAP + PADDING * 2
    duration = f"{animation_duration_ms(len(path), frame_duration_ms)}ms"

    eat_times: dict[tuple[int, int], int] = {}
    for index, step in enumerate(path):
        if step.action == "eat":
            eat_times[(step.x, step.y)] = index

    drawing = new_drawing(width, height)
    if dark:
        drawing.add(drawing.rect(insert=(0, 0), size=("100%", "100%"), fill=DARK_BACKGROUND))

    levels = grid.level_map()
    for y in range(grid.height):
        for x in range(grid.width):
            level = min(levels.get((x, y), 0), len(colors) - 1)
            color = colors[level]
            rect = drawing.rect(
                insert=_cell_origin(x, y),
                size=(CELL_SIZE, CELL_SIZE),
                rx=2,
                ry=2,
                fill=color,
            )
            eat_step = eat_times.get((x, y))
            if eat_step is not None and level > 0:
                eat_percent = eat_step / len(path)
                rect.add(
                    drawing.animate(
                        attributeName="fill",
                        values=[color, colors[0], colors[0], color],
                        keyTimes=f"0;{eat_percent:.4f};0.9999;1",
                        dur=duration,
                        repeatCount="indefinite",
                    )
                )
            drawing.add(rect)

    for segment in range(SNAKE_LENGTH - 1, -1, -1):
        x_values: list[int] = []
        y_values: list[int] = []
        for index in range(len(path)):
            step = path[max(0, index - segment)]
            px, py = _cell_origin(step.x, step.y)
            x_values.append(px)
            y_values.append(py)

        body = drawing.rect(
            size=(CELL_SIZE, CELL_SIZE),
            rx=2,
            ry=2,
            fill=SNAKE_HEAD_COLOR if segment == 0 else SNAKE_BODY_COLOR,
            opacity=round(1 - segment * 0.2, 2),
        )
        body.add(
            drawing.animate(
                attributeName="x", values=x_values, dur=duration, repeatCount="indefinite"
            )
        )
        body.add(
            drawing.animate(
                attributeName="y", values=y_values, dur=duration, repeatCount="indefinite"
            )
        )
        drawing.add(body)

    return drawing.tostring()
