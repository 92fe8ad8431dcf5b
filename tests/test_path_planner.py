import random

from multicontrib.models import PathStep
from multicontrib.services.path_planner import plan_path


def _walk(path: list[PathStep]) -> list[tuple[int, int, str]]:
    return [(step.x, step.y, step.action) for step in path]


def test_empty_grid_yields_single_move_at_origin(grid_of) -> None:
    path = plan_path(grid_of({}, width=5))

    assert path == [PathStep(x=0, y=0, action="move")]


def test_active_origin_is_eaten_without_moving(grid_of) -> None:
    path = plan_path(grid_of({(0, 0): 3}))

    assert path == [PathStep(x=0, y=0, action="eat", level=3)]


def test_two_cells_on_first_row(grid_of) -> None:
    path = plan_path(grid_of({(0, 0): 3, (2, 0): 1}))

    assert path == [
        PathStep(x=0, y=0, action="eat", level=3),
        PathStep(x=1, y=0, action="move"),
        PathStep(x=2, y=0, action="eat", level=1),
        PathStep(x=1, y=0, action="move"),
        PathStep(x=0, y=0, action="move"),
    ]


def test_closes_x_gap_before_y_gap(grid_of) -> None:
    path = plan_path(grid_of({(2, 3): 4}))

    assert _walk(path) == [
        (1, 0, "move"),
        (2, 0, "move"),
        (2, 1, "move"),
        (2, 2, "move"),
        (2, 3, "eat"),
        (1, 3, "move"),
        (0, 3, "move"),
        (0, 2, "move"),
        (0, 1, "move"),
        (0, 0, "move"),
    ]


def test_ties_go_to_first_cell_in_row_major_order(grid_of) -> None:
    # (1, 0) and (0, 1) are both one step away; row 0 is scanned first.
    path = plan_path(grid_of({(0, 1): 2, (1, 0): 1}))

    assert _walk(path) == [
        (1, 0, "eat"),
        (0, 0, "move"),
        (0, 1, "eat"),
        (0, 0, "move"),
    ]


def test_greedy_picks_nearest_before_enumeration_order(grid_of) -> None:
    path = plan_path(grid_of({(5, 0): 1, (1, 1): 2}))

    eats = [(step.x, step.y) for step in path if step.action == "eat"]
    assert eats == [(1, 1), (5, 0)]


def _random_grid(grid_of, seed: int):
    rng = random.Random(seed)
    levels = {
        (week, day): rng.randint(1, 4)
        for week in range(30)
        for day in range(7)
        if rng.random() < 0.3
    }
    return grid_of(levels, width=30)


def test_path_is_connected_lattice_walk_ending_at_origin(grid_of) -> None:
    for seed in range(5):
        grid = _random_grid(grid_of, seed)
        path = plan_path(grid)

        position = (0, 0)
        for step in path:
            distance = abs(step.x - position[0]) + abs(step.y - position[1])
            assert distance == 1 or (distance == 0 and step.action == "eat")
            position = (step.x, step.y)
        assert position == (0, 0)


def test_every_active_cell_is_eaten_exactly_once(grid_of) -> None:
    grid = _random_grid(grid_of, 42)

    path = plan_path(grid)

    eats = [(step.x, step.y) for step in path if step.action == "eat"]
    assert len(eats) == len(set(eats))
    assert set(eats) == {(cell.week, cell.weekday) for cell in grid.active_cells()}
    levels = grid.level_map()
    assert all(step.level == levels[(step.x, step.y)] for step in path if step.action == "eat")


def test_plan_is_deterministic(grid_of) -> None:
    grid = _random_grid(grid_of, 7)

    assert plan_path(grid) == plan_path(grid)


def test_first_step_moves_away_from_origin(grid_of) -> None:
    path = plan_path(grid_of({(3, 2): 1, (0, 4): 2}))

    assert (path[0].x, path[0].y) != (0, 0)
    assert abs(path[0].x) + abs(path[0].y) == 1
