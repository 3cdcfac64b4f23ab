"""Settings file loading and Config assembly."""

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from giglio.domain.models import Config, GiglioError
from giglio.frontend import create_frontend
from giglio.sequencing.executors import create_executor
from giglio.timers import create_timer

logger = logging.getLogger(__name__)

CONFIG_FILE = "giglio.yaml"


@dataclass(frozen=True)
class Settings:
    """Named strategies and run sizes, before they are turned into a Config."""

    frontend: str = "auto"
    timer: str = "auto"
    executor: str = "yielding"
    reps: int = 1000
    warmup_reps: int = 10

    def merged(self, **overrides: Any) -> "Settings":
        """Return a copy with every override that is not None applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return dataclasses.replace(self, **changes)


_FIELD_TYPES: dict[str, type] = {f.name: type(f.default) for f in dataclasses.fields(Settings)}


def config_file(project_root: Path) -> Path:
    """Return the giglio.yaml path for a project."""
    return project_root / CONFIG_FILE


def load_settings(path: Path) -> Settings:
    """Load Settings from a YAML file. A missing file yields the defaults."""
    if not path.exists():
        return Settings()
    try:
        data: Any = yaml.safe_load(path.read_text()) or {}
    except yaml.YAMLError as exc:
        raise GiglioError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise GiglioError(f"{path} must contain a mapping, got {type(data).__name__}")

    values: dict[str, Any] = {}
    for key, value in data.items():
        expected = _FIELD_TYPES.get(key)
        if expected is None:
            logger.warning("Ignoring unknown setting %r in %s", key, path)
            continue
        if not isinstance(value, expected) or isinstance(value, bool):
            raise GiglioError(
                f"Setting {key!r} in {path} must be {expected.__name__}, got {value!r}"
            )
        if isinstance(value, int) and value < 0:
            raise GiglioError(f"Setting {key!r} in {path} must be >= 0, got {value}")
        values[key] = value
    return Settings(**values)


def build_config(settings: Settings) -> Config:
    """Resolve strategy names into a Config."""
    return Config(
        frontend=create_frontend(settings.frontend),
        timer=create_timer(settings.timer),
        executor=create_executor(settings.executor),
        warmup_reps=settings.warmup_reps,
    )
