"""Greedy walk over the active cells of a contribution grid.

The walk starts and ends at (0, 0), moves one lattice unit per step and
closes the x gap before the y gap. Targets are picked nearest-first by
Manhattan distance; ties go to the earliest cell in row-major order
(weekday outer, week inner). The result is deterministic but not a
shortest tour.
"""

from loguru import logger

from multicontrib.models import ContributionGrid
from multicontrib.models import PathStep


class _Target:
    __slots__ = ("x", "y", "level")

    def __init__(self, x: int, y: int, level: int) -> None:
        self.x = x
        self.y = y
        self.level = level


class _WalkState:
    """Position, visited set and emitted steps threaded through the walk."""

    def __init__(self, targets: list[_Target]) -> None:
        self.targets = targets
        self.visited: set[tuple[int, int]] = set()
        self.x = 0
        self.y = 0
        self.steps: list[PathStep] = []

    @property
    def done(self) -> bool:
        return len(self.visited) == len(self.targets)

    def nearest(self) -> _Target:
        best: _Target | None = None
        best_distance = 0
        for target in self.targets:
            if (target.x, target.y) in self.visited:
                continue
            distance = abs(target.x - self.x) + abs(target.y - self.y)
            # Strict comparison keeps the first target in enumeration order on ties.
            if best is None or distance < best_distance:
                best = target
                best_distance = distance
        if best is None:
            raise RuntimeError("no unvisited target left")
        return best

    def step_toward(self, x: int, y: int) -> None:
        if self.x < x:
            self.x += 1
        elif self.x > x:
            self.x -= 1
        elif self.y < y:
            self.y += 1
        elif self.y > y:
            self.y -= 1

    def eat(self, target: _Target) -> None:
        # The unit step that lands on the target is the eat step itself;
        # a target under the current position is eaten without moving.
        while abs(target.x - self.x) + abs(target.y - self.y) > 1:
            self.step_toward(target.x, target.y)
            self.steps.append(PathStep(x=self.x, y=self.y, action="move"))
        self.x = target.x
        self.y = target.y
        self.steps.append(
            PathStep(x=self.x, y=self.y, action="eat", level=target.level)
        )
        self.visited.add((target.x, target.y))

    def return_home(self) -> None:
        while (self.x, self.y) != (0, 0):
            self.step_toward(0, 0)
            self.steps.append(PathStep(x=self.x, y=self.y, action="move"))


def _enumerate_targets(grid: ContributionGrid) -> list[_Target]:
    levels = grid.level_map()
    return [
        _Target(x, y, levels[(x, y)])
        for y in range(grid.height)
        for x in range(grid.width)
        if levels.get((x, y), 0) > 0
    ]


def plan_path(grid: ContributionGrid) -> list[PathStep]:
    """Plan the walk that eats every active cell once and returns to (0, 0)."""

    targets = _enumerate_targets(grid)
    if not targets:
        return [PathStep(x=0, y=0, action="move")]

    state = _WalkState(targets)
    while not state.done:
        state.eat(state.nearest())
    state.return_home()

    logger.info(f"Path: {len(state.steps)} steps, {len(targets)} cells to eat")
    return state.steps
