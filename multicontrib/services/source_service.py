import asyncio
from collections.abc import Sequence

import httpx
from loguru import logger

from multicontrib.github_api import fetch_user_activity
from multicontrib.models import LanguageShare
from multicontrib.models import MergedActivity
from multicontrib.models import ProfileStats
from multicontrib.models import SourceActivity
from multicontrib.services.calendar_service import DEFAULT_LEVEL_THRESHOLDS
from multicontrib.services.calendar_service import build_activity_series
from multicontrib.services.calendar_service import build_grid
from multicontrib.services.stats_service import merge_languages
from multicontrib.services.stats_service import merge_stats


class InvalidGitHubTokenError(Exception):
    """Raised when GitHub rejects the provided token."""


class GitHubAPIError(Exception):
    """Raised when GitHub requests fail for non-auth reasons."""


class SourceConfigError(ValueError):
    """Raised when user names and tokens cannot be paired."""


def pair_tokens(user_names: Sequence[str], tokens: Sequence[str]) -> list[tuple[str, str]]:
    """Pair every user with a token.

    A single token is shared by all users; otherwise the counts must match.
    """

    if not user_names:
        raise SourceConfigError("at least one GitHub user name is required")
    if not tokens:
        raise SourceConfigError("at least one GitHub token is required")
    if len(tokens) == 1:
        return [(user, tokens[0]) for user in user_names]
    if len(tokens) != len(user_names):
        raise SourceConfigError(
            f"Mismatch: {len(user_names)} usernames but {len(tokens)} tokens"
        )
    return list(zip(user_names, tokens))


async def fetch_source(
    client: httpx.AsyncClient, username: str, token: str, graphql_url: str
) -> SourceActivity:
    """Fetch and validate one account's activity."""

    try:
        raw = await fetch_user_activity(
            client, username=username, token=token, graphql_url=graphql_url
        )
    except httpx.HTTPStatusError as exc:
        if exc.response.status_code in {401, 403}:
            raise InvalidGitHubTokenError(f"GitHub rejected the token for {username}") from exc
        raise GitHubAPIError(
            f"GitHub request for {username} failed with {exc.response.status_code}"
        ) from exc
    except Exception as exc:
        raise GitHubAPIError(f"GitHub request for {username} failed: {exc}") from exc

    return SourceActivity(
        source=username,
        series=build_activity_series(username, raw["days"]),
        stats=ProfileStats.model_validate(raw["stats"]),
        languages=[LanguageShare.model_validate(item) for item in raw["languages"]],
    )


async def fetch_all_sources(
    user_names: Sequence[str],
    tokens: Sequence[str],
    graphql_url: str,
    timeout: float = 20.0,
    client: httpx.AsyncClient | None = None,
) -> list[SourceActivity]:
    """Fetch every account concurrently; the first failure fails the whole set."""

    pairs = pair_tokens(user_names, tokens)
    logger.info(f"Users: {', '.join(user for user, _ in pairs)}")

    async def gather(active_client: httpx.AsyncClient) -> list[SourceActivity]:
        return list(
            await asyncio.gather(
                *(
                    fetch_source(active_client, user, token, graphql_url)
                    for user, token in pairs
                )
            )
        )

    if client is not None:
        return await gather(client)
    async with httpx.AsyncClient(timeout=timeout) as own_client:
        return await gather(own_client)


def merge_sources(
    sources: Sequence[SourceActivity],
    thresholds: Sequence[int] = DEFAULT_LEVEL_THRESHOLDS,
) -> MergedActivity:
    """Merge calendars, counters and languages of every fetched account."""

    grid = build_grid([source.series for source in sources], thresholds)
    stats = merge_stats([source.stats for source in sources])
    languages = merge_languages([source.languages for source in sources])
    logger.info(
        f"Merged: {stats.total_contributions} contributions, {stats.commits} commits"
    )
    return MergedActivity(
        sources=[source.source for source in sources],
        grid=grid,
        stats=stats,
        languages=languages,
    )
