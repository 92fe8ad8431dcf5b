from pydantic import field_validator
from pydantic_settings import BaseSettings
from pydantic_settings import SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Values are read from process environment and optionally from `.env`.
    List-like inputs (user names, tokens, snake outputs) accept commas or
    newlines as separators.
    """

    github_graphql_url: str = "https://api.github.com/graphql"
    github_user_names: str = ""
    github_tokens: str = ""
    request_timeout_seconds: float = 20.0

    level_thresholds: tuple[int, ...] = (2, 5, 9)
    frame_duration_ms: int = 15

    snake_outputs: str = (
        "dist/github-snake.svg\ndist/github-snake-dark.svg?palette=github-dark"
    )
    profile_output_dir: str = "profile-3d-contrib"
    profile_theme: str = "night-rainbow"
    trophies_output: str = "dist/github-trophies.svg"
    trophy_theme: str = "darkhub"
    trophy_column: int = 4
    trophy_margin_w: int = 15
    trophy_margin_h: int = 15
    trophy_no_frame: bool = True
    trophy_no_bg: bool = True

    log_level: str = "INFO"
    sentry_dsn: str | None = None
    environment: str = "development"
    release: str | None = None
    sentry_traces_sample_rate: float = 0.1
    rate_limit_per_minute: int = 30
    rate_limit_window_seconds: int = 60

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @field_validator("level_thresholds")
    @classmethod
    def _thresholds_increasing(cls, value: tuple[int, ...]) -> tuple[int, ...]:
        if not value:
            raise ValueError("level_thresholds must not be empty")
        if value[0] < 1:
            raise ValueError("level_thresholds must be positive")
        if any(later <= earlier for earlier, later in zip(value, value[1:])):
            raise ValueError("level_thresholds must be strictly increasing")
        return value

    @field_validator("trophy_column")
    @classmethod
    def _column_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("trophy_column must be at least 1")
        return value


def split_list(raw: str) -> list[str]:
    """Split a comma or newline separated setting into trimmed, non-empty items."""

    items = raw.replace("\n", ",").split(",")
    return [item.strip() for item in items if item.strip()]
