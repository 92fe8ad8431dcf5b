from collections.abc import Mapping
from datetime import datetime
from datetime import UTC
from typing import Any

import httpx
from loguru import logger


USER_AGENT = "multicontrib"
DAYS_PER_YEAR = 365.25

ACTIVITY_QUERY = """
query($login: String!) {
  user(login: $login) {
    createdAt
    followers { totalCount }
    contributionsCollection {
      totalCommitContributions
      restrictedContributionsCount
      totalIssueContributions
      totalPullRequestContributions
      totalPullRequestReviewContributions
      totalRepositoryContributions
      contributionCalendar {
        totalContributions
        weeks {
          contributionDays {
            date
            weekday
            contributionCount
          }
        }
      }
    }
    repositories(first: 100, ownerAffiliations: OWNER, orderBy: {field: STARGAZERS, direction: DESC}) {
      totalCount
      nodes {
        stargazerCount
        forkCount
        languages(first: 10, orderBy: {field: SIZE, direction: DESC}) {
          edges {
            size
            node { name color }
          }
        }
      }
    }
  }
}
"""


def _require_mapping(value: Any, message: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValueError(message)
    return value


def _int(value: Any) -> int:
    return value if isinstance(value, int) else 0


def _total_count(value: Any) -> int:
    if isinstance(value, Mapping):
        return _int(value.get("totalCount"))
    return 0


def _parse_days(calendar: Mapping[str, Any]) -> list[dict[str, Any]]:
    weeks = calendar.get("weeks")
    if not isinstance(weeks, list):
        raise ValueError("GitHub contribution weeks are missing")

    # Records are passed through as reported; validation happens per source
    # so a bad record fails loudly instead of being dropped here.
    days: list[dict[str, Any]] = []
    for week in weeks:
        if not isinstance(week, Mapping):
            continue
        contribution_days = week.get("contributionDays")
        if not isinstance(contribution_days, list):
            continue
        for item in contribution_days:
            if not isinstance(item, Mapping):
                continue
            days.append(
                {
                    "date": item.get("date"),
                    "weekday": item.get("weekday"),
                    "count": item.get("contributionCount"),
                }
            )
    return days


def _account_years(raw_created_at: Any, now: datetime) -> int:
    if not isinstance(raw_created_at, str):
        return 0
    created_at = datetime.fromisoformat(raw_created_at.replace("Z", "+00:00"))
    return int((now - created_at).days // DAYS_PER_YEAR)


def _parse_repositories(repositories: Mapping[str, Any]) -> tuple[int, int, list[dict[str, Any]]]:
    stars = 0
    forks = 0
    languages: dict[str, dict[str, Any]] = {}
    nodes = repositories.get("nodes")
    for repo in nodes if isinstance(nodes, list) else []:
        if not isinstance(repo, Mapping):
            continue
        stars += _int(repo.get("stargazerCount"))
        forks += _int(repo.get("forkCount"))
        edges = (repo.get("languages") or {}).get("edges") or []
        for edge in edges:
            node = edge.get("node") if isinstance(edge, Mapping) else None
            if not isinstance(node, Mapping) or not isinstance(node.get("name"), str):
                continue
            name = node["name"]
            entry = languages.setdefault(
                name, {"name": name, "color": node.get("color"), "size": 0}
            )
            entry["size"] += _int(edge.get("size"))
    return stars, forks, list(languages.values())


async def fetch_user_activity(
    client: httpx.AsyncClient,
    username: str,
    token: str,
    graphql_url: str,
    now: datetime | None = None,
) -> dict[str, Any]:
    """Fetch one account's contribution calendar, counters and languages.

    Returns a dict with raw `days` records, a `stats` mapping keyed like
    `ProfileStats` and a `languages` list.
    """

    if not token:
        raise ValueError("a GitHub token is required for GraphQL requests")

    logger.debug(f"Fetching data for {username} from {graphql_url}")
    response = await client.post(
        graphql_url,
        json={"query": ACTIVITY_QUERY, "variables": {"login": username}},
        headers={
            "Authorization": f"Bearer {token}",
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        },
    )
    response.raise_for_status()

    payload = _require_mapping(response.json(), "GitHub GraphQL response is invalid")
    if payload.get("errors"):
        raise ValueError(f"GitHub GraphQL returned errors: {payload['errors']}")

    data = _require_mapping(payload.get("data"), "GitHub GraphQL data is missing")
    user = _require_mapping(data.get("user"), f"GitHub user {username} not found")
    collection = _require_mapping(
        user.get("contributionsCollection"), "GitHub contributionsCollection is missing"
    )
    calendar = _require_mapping(
        collection.get("contributionCalendar"), "GitHub contributionCalendar is missing"
    )
    repositories = user.get("repositories")
    repositories = repositories if isinstance(repositories, Mapping) else {}

    stars, forks, languages = _parse_repositories(repositories)
    stats = {
        "commits": _int(collection.get("totalCommitContributions"))
        + _int(collection.get("restrictedContributionsCount")),
        "issues": _int(collection.get("totalIssueContributions")),
        "pull_requests": _int(collection.get("totalPullRequestContributions")),
        "reviews": _int(collection.get("totalPullRequestReviewContributions")),
        "repos": _int(collection.get("totalRepositoryContributions")),
        "total_contributions": _int(calendar.get("totalContributions")),
        "total_stars": stars,
        "total_forks": forks,
        "followers": _total_count(user.get("followers")),
        "owned_repos": _int(repositories.get("totalCount")),
        "account_years": _account_years(user.get("createdAt"), now or datetime.now(UTC)),
    }
    days = _parse_days(calendar)

    logger.info(
        f"  {username}: {stats['total_contributions']} contributions, "
        f"{stats['commits']} commits, {len(days)} days"
    )
    return {"days": days, "stats": stats, "languages": languages}
