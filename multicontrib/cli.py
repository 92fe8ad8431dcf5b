"""Command line entry point: fetch, merge and write the SVG cards."""

import argparse
import asyncio
import sys
from pathlib import Path

import sentry_sdk
from loguru import logger

from multicontrib.core.logger import setup_logger
from multicontrib.core.observability import init_sentry
from multicontrib.models import MergedActivity
from multicontrib.services.calendar_service import MalformedActivityError
from multicontrib.services.path_planner import plan_path
from multicontrib.services.profile_service import render_profile_svg
from multicontrib.services.snake_service import parse_output_spec
from multicontrib.services.snake_service import render_snake_svg
from multicontrib.services.source_service import GitHubAPIError
from multicontrib.services.source_service import InvalidGitHubTokenError
from multicontrib.services.source_service import SourceConfigError
from multicontrib.services.source_service import fetch_all_sources
from multicontrib.services.source_service import merge_sources
from multicontrib.services.trophy_service import render_trophies_svg
from multicontrib.settings import Settings
from multicontrib.settings import split_list


COMMANDS = ("snake", "profile", "trophies", "all")


def write_svg(path: str | Path, svg: str) -> Path:
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(svg, encoding="utf-8")
    logger.info(f"Wrote {target}")
    return target


def write_snakes(activity: MergedActivity, settings: Settings) -> list[Path]:
    path = plan_path(activity.grid)
    written = []
    for entry in split_list(settings.snake_outputs):
        file_path, palette = parse_output_spec(entry)
        logger.info(f"Generating: {file_path} ({palette})")
        svg = render_snake_svg(
            activity.grid, path, palette=palette, frame_duration_ms=settings.frame_duration_ms
        )
        written.append(write_svg(file_path, svg))
    return written


def write_profile(activity: MergedActivity, settings: Settings) -> Path:
    svg = render_profile_svg(
        activity.grid, activity.stats, activity.languages, theme_name=settings.profile_theme
    )
    target = Path(settings.profile_output_dir) / f"profile-{settings.profile_theme}.svg"
    return write_svg(target, svg)


def write_trophies(activity: MergedActivity, settings: Settings) -> Path:
    svg = render_trophies_svg(
        activity.stats,
        theme_name=settings.trophy_theme,
        column=settings.trophy_column,
        margin_w=settings.trophy_margin_w,
        margin_h=settings.trophy_margin_h,
        no_frame=settings.trophy_no_frame,
        no_bg=settings.trophy_no_bg,
    )
    return write_svg(settings.trophies_output, svg)


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Render merged GitHub contribution cards (snake, 3D profile, trophies) as SVG."
    )
    ap.add_argument("command", choices=COMMANDS, help="Which card(s) to generate")
    ap.add_argument("--users", default=None, help="Comma/newline separated GitHub logins (default: env GITHUB_USER_NAMES)")
    ap.add_argument("--tokens", default=None, help="One shared token or one per user (default: env GITHUB_TOKENS)")
    ap.add_argument("--snake-outputs", default=None, help="Snake outputs, one per line: path[?palette=name]")
    ap.add_argument("--profile-dir", default=None, help="Output directory for the 3D profile card")
    ap.add_argument("--profile-theme", default=None, help="Profile theme (default: night-rainbow)")
    ap.add_argument("--trophies-output", default=None, help="Output path for the trophy grid")
    ap.add_argument("--trophy-theme", default=None, help="Trophy theme (default: darkhub)")
    ap.add_argument("--column", type=int, default=None, help="Trophies per row (default: 4)")
    ap.add_argument("--log-level", default=None, help="Log level (default: env LOG_LEVEL or INFO)")
    return ap


def settings_from_args(args: argparse.Namespace) -> Settings:
    overrides = {
        "github_user_names": args.users,
        "github_tokens": args.tokens,
        "snake_outputs": args.snake_outputs,
        "profile_output_dir": args.profile_dir,
        "profile_theme": args.profile_theme,
        "trophies_output": args.trophies_output,
        "trophy_theme": args.trophy_theme,
        "trophy_column": args.column,
        "log_level": args.log_level,
    }
    return Settings(**{key: value for key, value in overrides.items() if value is not None})


def run(command: str, settings: Settings) -> list[Path]:
    sources = asyncio.run(
        fetch_all_sources(
            split_list(settings.github_user_names),
            split_list(settings.github_tokens),
            graphql_url=settings.github_graphql_url,
            timeout=settings.request_timeout_seconds,
        )
    )
    activity = merge_sources(sources, settings.level_thresholds)

    written: list[Path] = []
    if command in ("snake", "all"):
        written.extend(write_snakes(activity, settings))
    if command in ("profile", "all"):
        written.append(write_profile(activity, settings))
    if command in ("trophies", "all"):
        written.append(write_trophies(activity, settings))
    return written


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = settings_from_args(args)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    setup_logger(settings.log_level)
    init_sentry(settings)

    try:
        run(args.command, settings)
    except SourceConfigError as exc:
        logger.error(str(exc))
        return 2
    except (InvalidGitHubTokenError, GitHubAPIError, MalformedActivityError) as exc:
        sentry_sdk.capture_exception(exc)
        logger.error(str(exc))
        return 1

    logger.info("Done!")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
