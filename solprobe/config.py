import logging
import os
import tomllib
from dataclasses import asdict, dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import tomli_w

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://api.mainnet-beta.solana.com"
DEFAULT_UPDATE_INTERVAL = 5


class ConfigError(ValueError):
    """The configuration file or an override could not be used."""


@dataclass(frozen=True)
class Config:
    default_url: str = DEFAULT_URL
    update_interval: int = DEFAULT_UPDATE_INTERVAL


def config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME")
    root = Path(base) if base else Path.home() / ".config"
    return root / "solprobe"


def config_path() -> Path:
    override = os.environ.get("SOLPROBE_CONFIG")
    if override:
        return Path(override).expanduser()
    return config_dir() / "config.toml"


def _coerce_url(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"default_url must be a non-empty string, got {value!r}")
    return value.strip()


def _coerce_interval(value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"update_interval must be a whole number of seconds, got {value!r}")
    try:
        interval = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(
            f"update_interval must be a whole number of seconds, got {value!r}"
        ) from exc
    if interval < 1:
        raise ConfigError(f"update_interval must be at least 1 second, got {interval}")
    return interval


def _from_mapping(data: Mapping[str, Any]) -> Config:
    return Config(
        default_url=_coerce_url(data.get("default_url", DEFAULT_URL)),
        update_interval=_coerce_interval(data.get("update_interval", DEFAULT_UPDATE_INTERVAL)),
    )


def _apply_env(config: Config) -> Config:
    url = os.environ.get("SOLPROBE_RPC_URL")
    if url:
        config = replace(config, default_url=_coerce_url(url))
    interval = os.environ.get("SOLPROBE_UPDATE_INTERVAL")
    if interval:
        config = replace(config, update_interval=_coerce_interval(interval))
    return config


def save_config(config: Config, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomli_w.dumps(asdict(config)), encoding="utf-8")


def load_config(path: str | Path | None = None) -> Config:
    """Read the TOML config, writing the defaults first if the file does not exist yet.

    Environment overrides (SOLPROBE_RPC_URL, SOLPROBE_UPDATE_INTERVAL) win
    over the file.
    """
    path = Path(path).expanduser() if path else config_path()
    if path.exists():
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc
        config = _from_mapping(data)
    else:
        config = Config()
        try:
            save_config(config, path)
            logger.info("Wrote default config to %s", path)
        except OSError as exc:
            logger.warning("Could not write default config to %s: %s", path, exc)
    return _apply_env(config)
