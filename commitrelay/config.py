"""Configuration loading from YAML and environment.

Secrets (tokens) are taken from environment variables or from files
(Docker secrets). Never put real tokens in config files committed to the
repo.

The four values the relay cannot work without (repository owner,
repository name, GitHub token, downstream base URL) are resolved once at
startup into an immutable RelaySettings by resolve_settings().
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DOWNSTREAM_PATH = "/api/updatenotioncalendar"


def _read_secret(env_key: str, file_env_key: str) -> str | None:
    """Read secret from env var or from file path in env (e.g. Docker
    secrets)."""
    value = _current_env.get(env_key)
    if value:
        return value.strip()
    file_path = _current_env.get(file_env_key)
    if file_path:
        return Path(file_path).read_text().strip()
    return None


# Injected by load_config so validators can read env/file
_current_env: dict[str, str] = {}


class ConfigError(Exception):
    """Raised when required settings are missing."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required settings: {', '.join(missing)}")


class GitHubConfig(BaseSettings):
    """GitHub repository and API settings."""

    model_config = SettingsConfigDict(env_prefix="GITHUB_", extra="ignore")

    owner: str | None = Field(default=None, description="Repository owner (env: GITHUB_REPO_OWNER)")
    repo: str | None = Field(default=None, description="Repository name (env: GITHUB_REPO_NAME)")
    token: str | None = Field(default=None, description="PAT or app token; use env or secret file")
    api_url: str = Field(default="https://api.github.com", description="API base URL")
    timeout: float | None = Field(default=None, gt=0, description="Request timeout in seconds")


class DownstreamConfig(BaseSettings):
    """Downstream update service (receives formatted commits)."""

    model_config = SettingsConfigDict(env_prefix="DOWNSTREAM_", extra="ignore")

    base_url: str | None = Field(default=None, description="Service base URL (env: BASE_URL)")
    path: str = Field(default=DOWNSTREAM_PATH, description="Endpoint path appended to base_url")
    timeout: float | None = Field(default=None, gt=0, description="Request timeout in seconds")


class FetchConfig(BaseSettings):
    """Commit fetch window and fan-out."""

    model_config = SettingsConfigDict(env_prefix="FETCH_", extra="ignore")

    window_minutes: int = Field(default=5, ge=1, le=1440, description="Look back this many minutes for commits")
    max_workers: int = Field(default=8, ge=1, le=64, description="Parallel commit detail requests")


class WebhookConfig(BaseSettings):
    """Webhook server settings."""

    model_config = SettingsConfigDict(env_prefix="WEBHOOK_", extra="ignore")

    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, ge=0, le=65535, description="Bind port (0 picks a free port)")
    path: str = Field(default="/api/getgitcommit", description="Webhook URL path")


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class AppConfig(BaseSettings):
    """Root application config from YAML + env."""

    model_config = SettingsConfigDict(extra="ignore")

    github: GitHubConfig = Field(default_factory=GitHubConfig)
    downstream: DownstreamConfig = Field(default_factory=DownstreamConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    webhook: WebhookConfig = Field(default_factory=WebhookConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @property
    def github_token_resolved(self) -> str | None:
        """Resolve GitHub token from config, env or Docker secret file."""
        t = self.github.token
        if t and not t.startswith("${"):
            return t
        return _read_secret("GITHUB_TOKEN", "GITHUB_TOKEN_FILE")


class RelaySettings(BaseModel):
    """Validated settings injected into every webhook request."""

    model_config = ConfigDict(frozen=True)

    owner: str
    repo: str
    token: str
    downstream_url: str
    api_url: str = "https://api.github.com"
    window_minutes: int = 5
    max_workers: int = 8
    github_timeout: float | None = None
    downstream_timeout: float | None = None


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if not value or value.startswith("${"):
        return None
    return value


def resolve_settings(config: AppConfig) -> RelaySettings:
    """Build RelaySettings from config.

    Raises ConfigError naming every missing value (empty strings count
    as missing).
    """
    owner = _clean(config.github.owner)
    repo = _clean(config.github.repo)
    token = _clean(config.github_token_resolved)
    base_url = _clean(config.downstream.base_url)

    missing = [
        name
        for name, value in (
            ("GITHUB_REPO_OWNER", owner),
            ("GITHUB_REPO_NAME", repo),
            ("GITHUB_TOKEN", token),
            ("BASE_URL", base_url),
        )
        if value is None
    ]
    if missing:
        raise ConfigError(missing)

    return RelaySettings(
        owner=owner,
        repo=repo,
        token=token,
        downstream_url=f"{base_url.rstrip('/')}{config.downstream.path}",
        api_url=config.github.api_url.rstrip("/"),
        window_minutes=config.fetch.window_minutes,
        max_workers=config.fetch.max_workers,
        github_timeout=config.github.timeout,
        downstream_timeout=config.downstream.timeout,
    )


def _substitute_env(value: Any) -> Any:
    """Replace ${VAR} and $VAR in strings with os.environ."""
    if isinstance(value, str):
        if value.startswith("${") and value.endswith("}"):
            key = value[2:-1].strip()
            return _current_env.get(key, value)
        if value.startswith("$") and not value.startswith("${"):
            key = value[1:].strip()
            return _current_env.get(key, value)
        return value
    if isinstance(value, dict):
        return {k: _substitute_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute_env(v) for v in value]
    return value


# Plain env names used by existing deployments, mapped onto config sections
_ENV_ALIASES = {
    "GITHUB_REPO_OWNER": ("github", "owner"),
    "GITHUB_REPO_NAME": ("github", "repo"),
    "BASE_URL": ("downstream", "base_url"),
}


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load config from YAML file (optional) and environment.

    Env: GITHUB_REPO_OWNER, GITHUB_REPO_NAME, BASE_URL, and GITHUB_TOKEN
    or GITHUB_TOKEN_FILE. Env wins over YAML.
    """
    global _current_env
    import os

    _current_env = dict(os.environ)

    path = config_path or Path("config.yaml")
    raw: dict[str, Any] = {}
    if path.is_file():
        raw = yaml.safe_load(path.read_text()) or {}
        raw = _substitute_env(raw)

    sections: dict[str, dict[str, Any]] = {
        name: dict(raw.get(name) or {}) for name in ("github", "downstream", "fetch", "webhook", "logging")
    }
    for env_key, (section, field) in _ENV_ALIASES.items():
        if _current_env.get(env_key):
            sections[section][field] = _current_env[env_key]

    return AppConfig(
        github=GitHubConfig(**sections["github"]),
        downstream=DownstreamConfig(**sections["downstream"]),
        fetch=FetchConfig(**sections["fetch"]),
        webhook=WebhookConfig(**sections["webhook"]),
        logging=LoggingConfig(**sections["logging"]),
    )
