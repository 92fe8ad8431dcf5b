from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi import Response
from loguru import logger

from multicontrib.api.schemas.calendar import CalendarResponse
from multicontrib.core.security import optional_bearer_token
from multicontrib.models import MergedActivity
from multicontrib.services.calendar_service import MalformedActivityError
from multicontrib.services.calendar_service import build_weeks_payload
from multicontrib.services.path_planner import plan_path
from multicontrib.services.profile_service import render_profile_svg
from multicontrib.services.snake_service import render_snake_svg
from multicontrib.services.source_service import GitHubAPIError
from multicontrib.services.source_service import InvalidGitHubTokenError
from multicontrib.services.source_service import SourceConfigError
from multicontrib.services.source_service import fetch_all_sources
from multicontrib.services.source_service import merge_sources
from multicontrib.services.trophy_service import render_trophies_svg
from multicontrib.settings import Settings
from multicontrib.settings import split_list


SVG_MEDIA_TYPE = "image/svg+xml"

router = APIRouter()


def get_settings() -> Settings:
    return Settings()


async def load_activity(
    users: str | None = Query(default=None, description="Comma separated GitHub logins"),
    token: str | None = Depends(optional_bearer_token),
    settings: Settings = Depends(get_settings),
) -> MergedActivity:
    """Fetch and merge the requested users, mapping failures to HTTP errors."""

    user_names = split_list(users or settings.github_user_names)
    tokens = [token] if token else split_list(settings.github_tokens)

    try:
        sources = await fetch_all_sources(
            user_names,
            tokens,
            graphql_url=settings.github_graphql_url,
            timeout=settings.request_timeout_seconds,
        )
        return merge_sources(sources, settings.level_thresholds)
    except SourceConfigError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except InvalidGitHubTokenError as exc:
        raise HTTPException(status_code=401, detail="GitHub token is invalid") from exc
    except GitHubAPIError as exc:
        logger.error(str(exc))
        raise HTTPException(status_code=502, detail="GitHub API request failed") from exc
    except MalformedActivityError as exc:
        logger.error(str(exc))
        raise HTTPException(status_code=502, detail=str(exc)) from exc


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Hello World"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/calendar", response_model=CalendarResponse)
async def get_calendar(activity: MergedActivity = Depends(load_activity)) -> dict[str, object]:
    """Return the merged calendar grid and the planned walk as JSON."""

    path = plan_path(activity.grid)
    return {
        "users": activity.sources,
        "total": activity.grid.total,
        "width": activity.grid.width,
        "height": activity.grid.height,
        "weeks": build_weeks_payload(activity.grid),
        "eat_steps": sum(1 for step in path if step.action == "eat"),
        "path": path,
    }


@router.get("/svg/snake")
async def get_snake_svg(
    palette: str = "github",
    activity: MergedActivity = Depends(load_activity),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Return the animated snake SVG for the merged calendar."""

    svg = render_snake_svg(
        activity.grid,
        plan_path(activity.grid),
        palette=palette,
        frame_duration_ms=settings.frame_duration_ms,
    )
    return Response(content=svg, media_type=SVG_MEDIA_TYPE)


@router.get("/svg/profile")
async def get_profile_svg(
    theme: str | None = None,
    activity: MergedActivity = Depends(load_activity),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Return the isometric profile card SVG."""

    svg = render_profile_svg(
        activity.grid,
        activity.stats,
        activity.languages,
        theme_name=theme or settings.profile_theme,
    )
    return Response(content=svg, media_type=SVG_MEDIA_TYPE)


@router.get("/svg/trophies")
async def get_trophies_svg(
    theme: str | None = None,
    column: int | None = Query(default=None, ge=1),
    activity: MergedActivity = Depends(load_activity),
    settings: Settings = Depends(get_settings),
) -> Response:
    """Return the trophy grid SVG for the merged account statistics."""

    svg = render_trophies_svg(
        activity.stats,
        theme_name=theme or settings.trophy_theme,
        column=column or settings.trophy_column,
        margin_w=settings.trophy_margin_w,
        margin_h=settings.trophy_margin_h,
        no_frame=settings.trophy_no_frame,
        no_bg=settings.trophy_no_bg,
    )
    return Response(content=svg, media_type=SVG_MEDIA_TYPE)
