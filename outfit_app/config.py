"""Configuration helpers for the outfit engine."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Dict, Optional

from models.taxonomy import SEASON_ALL, SEASON_LABELS

DEFAULT_DEBOUNCE_MS = 150
DEFAULT_MIN_COMPATIBILITY = 60
DEFAULT_CANDIDATE_LIMIT = 50
TUCK_STYLES = ("Tucked", "Untucked")


@dataclass
class EngineConfig:
    """Tunables for outfit building and scoring.

    Defaults are a 150ms score debounce, a compatibility floor of 60 for
    anchor filtering and at most 50 candidates.
    """

    debounce_ms: int = DEFAULT_DEBOUNCE_MS
    min_compatibility_score: int = DEFAULT_MIN_COMPATIBILITY
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT
    target_season: str = SEASON_ALL
    default_tuck_style: str = "Untucked"
    log_level: str = "INFO"
    environment: str | None = None

    @property
    def debounce_seconds(self) -> float:
        return self.debounce_ms / 1000

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Build a config from environment variables over an optional YAML file.

        The file is ``APP_CONFIG_PATH`` when set, otherwise
        ``<OUTFIT_CONFIG_DIR>/<APP_ENV>.yaml`` (``config/environments`` by
        default). Upper-cased environment variables win over file keys.
        Raises ``ValueError`` for values that cannot be used.
        """

        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("OUTFIT_CONFIG_DIR", "config/environments"))

        if config_path:
            path: Optional[Path] = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None
        file_values = _read_config_file(path) if path and path.exists() else {}

        def get_value(key: str) -> Optional[str]:
            raw = os.getenv(key.upper(), file_values.get(key))
            return raw.strip() if raw and raw.strip() else None

        target_season = (get_value("target_season") or SEASON_ALL).capitalize()
        if target_season not in SEASON_LABELS:
            raise ValueError(f"Config value target_season={target_season!r} is not one of {list(SEASON_LABELS)}")
        tuck_style = (get_value("default_tuck_style") or "Untucked").capitalize()
        if tuck_style not in TUCK_STYLES:
            raise ValueError(f"Config value default_tuck_style={tuck_style!r} is not one of {list(TUCK_STYLES)}")

        return cls(
            debounce_ms=_as_int("debounce_ms", get_value("debounce_ms"), DEFAULT_DEBOUNCE_MS),
            min_compatibility_score=_as_int(
                "min_compatibility_score", get_value("min_compatibility_score"), DEFAULT_MIN_COMPATIBILITY
            ),
            candidate_limit=_as_int("candidate_limit", get_value("candidate_limit"), DEFAULT_CANDIDATE_LIMIT),
            target_season=target_season,
            default_tuck_style=tuck_style,
            log_level=(get_value("log_level") or "INFO").upper(),
            environment=env_name,
        )


def _read_config_file(path: Path) -> Dict[str, str]:
    """Read flat ``key: value`` lines; comments and nested YAML are ignored."""

    values: Dict[str, str] = {}
    for line in path.read_text().splitlines():
        content = line.split(" #", 1)[0].strip()
        if not content or content.startswith("#") or ":" not in content or line[:1].isspace():
            continue
        key, raw_value = content.split(":", 1)
        value = raw_value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        values[key.strip()] = value
    return values


def _as_int(key: str, raw: Optional[str], default: int) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"Config value {key}={raw!r} is not an integer") from exc
    if value < 0:
        raise ValueError(f"Config value {key}={raw!r} must not be negative")
    return value


__all__ = ["EngineConfig"]
