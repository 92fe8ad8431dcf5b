import pytest

from multicontrib import cli
from multicontrib.models import ProfileStats
from multicontrib.services.calendar_service import MalformedActivityError
from multicontrib.services.source_service import pair_tokens


@pytest.fixture
def fake_fetch(monkeypatch: pytest.MonkeyPatch, source_activity):
    calls: list[list[tuple[str, str]]] = []

    async def fake_fetch_all_sources(user_names, tokens, graphql_url, timeout=20.0, client=None):
        pairs = pair_tokens(user_names, tokens)
        calls.append(pairs)
        return [
            source_activity(user, [0, 4, 0, 11, 2], stats=ProfileStats(commits=120, followers=4))
            for user, _ in pairs
        ]

    monkeypatch.setattr("multicontrib.cli.fetch_all_sources", fake_fetch_all_sources)
    return calls


def test_all_writes_every_card(fake_fetch, tmp_path) -> None:
    snake = tmp_path / "dist" / "github-snake.svg"
    snake_dark = tmp_path / "dist" / "github-snake-dark.svg"
    trophies = tmp_path / "dist" / "trophies.svg"

    exit_code = cli.main(
        [
            "all",
            "--users", "alice,bob",
            "--tokens", "t1,t2",
            "--snake-outputs", f"{snake}\n{snake_dark}?palette=github-dark",
            "--profile-dir", str(tmp_path / "profile"),
            "--profile-theme", "night-green",
            "--trophies-output", str(trophies),
            "--column", "2",
        ]
    )

    assert exit_code == 0
    assert fake_fetch == [[("alice", "t1"), ("bob", "t2")]]
    assert "#0d1117" not in snake.read_text(encoding="utf-8")
    assert "#0d1117" in snake_dark.read_text(encoding="utf-8")
    assert (tmp_path / "profile" / "profile-night-green.svg").read_text(encoding="utf-8").startswith("<svg")
    assert 'width="235"' in trophies.read_text(encoding="utf-8")


def test_snake_command_writes_only_snakes(fake_fetch, tmp_path) -> None:
    snake = tmp_path / "snake.svg"
    trophies = tmp_path / "trophies.svg"

    exit_code = cli.main(
        [
            "snake",
            "--users", "alice",
            "--tokens", "t",
            "--snake-outputs", str(snake),
            "--trophies-output", str(trophies),
        ]
    )

    assert exit_code == 0
    assert snake.exists()
    assert not trophies.exists()


def test_token_mismatch_exits_with_config_error(fake_fetch, tmp_path) -> None:
    exit_code = cli.main(
        ["trophies", "--users", "a,b,c", "--tokens", "t1,t2", "--trophies-output", str(tmp_path / "t.svg")]
    )

    assert exit_code == 2
    assert not (tmp_path / "t.svg").exists()


def test_invalid_option_value_exits_with_config_error() -> None:
    assert cli.main(["trophies", "--users", "alice", "--tokens", "t", "--column", "0"]) == 2


def test_malformed_source_exits_with_failure(monkeypatch, tmp_path) -> None:
    async def malformed_fetch(*args, **kwargs):
        raise MalformedActivityError("alice", 2, "count: Input should be greater than or equal to 0")

    monkeypatch.setattr("multicontrib.cli.fetch_all_sources", malformed_fetch)

    exit_code = cli.main(
        ["snake", "--users", "alice", "--tokens", "t", "--snake-outputs", str(tmp_path / "s.svg")]
    )

    assert exit_code == 1


def test_unknown_command_is_rejected() -> None:
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["render"])
