"""Configuration loading from YAML and environment.

Settings come from three places:

- environment variables (EnvSettings): token override, colour switches,
  editor/browser overrides and the config directory override;
- ``config.yml`` in the config directory (Config), edited by ``bb config``;
- ``hosts.yml`` in the config directory (HostsConfig), which records the
  active user per host. Tokens themselves are never stored in either file.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from bbcli.errors import ConfigError

DEFAULT_HOST = "bitbucket.org"
CONFIG_FILE = "config.yml"
HOSTS_FILE = "hosts.yml"


class EnvSettings(BaseSettings):
    """Recognised environment variables (names are matched case-insensitively)."""

    model_config = SettingsConfigDict(extra="ignore")

    bb_token: str | None = Field(default=None, description="Token override")
    bitbucket_token: str | None = Field(default=None, description="Alternative token variable")
    bb_config_dir: str | None = Field(default=None, description="Config directory override")
    xdg_config_home: str | None = Field(default=None, description="XDG base directory")
    no_color: str | None = Field(default=None, description="Standard colour switch (no-color.org)")
    bb_no_color: str | None = Field(default=None, description="Tool-specific colour switch")
    term: str | None = Field(default=None, description="Terminal type; 'dumb' disables colour")
    bb_editor: str | None = Field(default=None, description="Editor override")
    visual: str | None = Field(default=None)
    editor: str | None = Field(default=None)
    bb_browser: str | None = Field(default=None, description="Browser override")
    browser: str | None = Field(default=None)

    @property
    def token(self) -> str | None:
        """Raw token from BB_TOKEN, then BITBUCKET_TOKEN."""
        return self.bb_token or self.bitbucket_token or None

    @property
    def color_disabled(self) -> bool:
        return bool(self.no_color or self.bb_no_color or self.term == "dumb")

    @property
    def config_dir(self) -> Path:
        """BB_CONFIG_DIR, else $XDG_CONFIG_HOME/bb, else ~/.config/bb."""
        if self.bb_config_dir:
            return Path(self.bb_config_dir)
        if self.xdg_config_home:
            return Path(self.xdg_config_home) / "bb"
        return Path.home() / ".config" / "bb"


class LoggingConfig(BaseSettings):
    """Logging settings."""

    model_config = SettingsConfigDict(env_prefix="LOGGING_", extra="ignore")

    level: str = Field(default="WARNING", description="Log level")
    format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format",
    )


class Config(BaseModel):
    """User preferences from config.yml."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    git_protocol: str = Field(default="ssh", description="ssh or https")
    editor: str = Field(default="", description="Editor command for bodies and comments")
    prompt: str = Field(default="enabled", description="enabled or disabled")
    pager: str = Field(default="")
    browser: str = Field(default="", description="Browser command")
    http_timeout: int = Field(default=30, ge=1, description="Request timeout in seconds")
    default_workspace: str = Field(default="", description="Workspace for project commands")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


class HostEntry(BaseModel):
    """One host in hosts.yml."""

    model_config = ConfigDict(extra="ignore")

    user: str = ""
    users: dict[str, Any] = Field(default_factory=dict)
    git_protocol: str = ""


class HostsConfig(BaseModel):
    """Known hosts and their active users."""

    hosts: dict[str, HostEntry] = Field(default_factory=dict)

    def active_user(self, host: str = DEFAULT_HOST) -> str | None:
        entry = self.hosts.get(host)
        if entry is None or not entry.user:
            return None
        return entry.user


# Keys editable through `bb config`, in display order
CONFIG_KEYS = ("git_protocol", "editor", "prompt", "pager", "browser", "http_timeout", "default_workspace")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text())
    except yaml.YAMLError as e:
        raise ConfigError(f"could not parse {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"could not read {path}: {e}") from e
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError(f"could not parse {path}: expected a mapping")
    return raw


def load_config(config_path: Path | None = None, settings: EnvSettings | None = None) -> Config:
    """Load config.yml; a missing file yields defaults."""
    settings = settings or EnvSettings()
    path = config_path or settings.config_dir / CONFIG_FILE
    if not path.is_file():
        return Config()

    raw = _read_yaml(path)
    logging_raw = raw.pop("logging", None) or {}
    if not isinstance(logging_raw, dict):
        raise ConfigError(f"could not parse {path}: logging must be a mapping")
    try:
        return Config(**raw, logging=LoggingConfig(**logging_raw))
    except ValidationError as e:
        raise ConfigError(f"invalid config in {path}: {e}") from e


def load_hosts(hosts_path: Path | None = None, settings: EnvSettings | None = None) -> HostsConfig:
    """Load hosts.yml; a missing file yields no hosts."""
    settings = settings or EnvSettings()
    path = hosts_path or settings.config_dir / HOSTS_FILE
    if not path.is_file():
        return HostsConfig()

    raw = _read_yaml(path)
    try:
        return HostsConfig(hosts={host: entry or {} for host, entry in raw.items()})
    except ValidationError as e:
        raise ConfigError(f"invalid hosts file {path}: {e}") from e


def save_config(config: Config, config_path: Path | None = None, settings: EnvSettings | None = None) -> Path:
    """Write non-default values to config.yml and return its path."""
    settings = settings or EnvSettings()
    path = config_path or settings.config_dir / CONFIG_FILE
    data = config.model_dump(exclude={"logging"}, exclude_defaults=True)
    logging_data = config.logging.model_dump(exclude_defaults=True)
    if logging_data:
        data["logging"] = logging_data
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
    except OSError as e:
        raise ConfigError(f"could not save config: {e}") from e
    return path


def get_config_value(config: Config, key: str) -> str:
    if key not in CONFIG_KEYS:
        raise ConfigError(f"unknown configuration key: {key}")
    return str(getattr(config, key))


def set_config_value(config: Config, key: str, value: str) -> None:
    """Validate and assign one key; raises ConfigError on bad input."""
    if key not in CONFIG_KEYS:
        raise ConfigError(f"unknown configuration key: {key}")
    if key == "git_protocol" and value not in ("ssh", "https"):
        raise ConfigError(f"invalid git_protocol: {value} (must be 'ssh' or 'https')")
    if key == "prompt" and value not in ("enabled", "disabled"):
        raise ConfigError(f"invalid prompt value: {value} (must be 'enabled' or 'disabled')")
    if key == "http_timeout":
        try:
            seconds = int(value)
        except ValueError as e:
            raise ConfigError(f"invalid http_timeout: {value} (must be a number)") from e
        if seconds < 1:
            raise ConfigError("http_timeout must be at least 1 second")
        config.http_timeout = seconds
        return
    setattr(config, key, value)
