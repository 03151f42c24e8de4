"""Process-wide configuration, overridable per task or per test."""

import os
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path

from src.lingomate.runtime.config.config_data import ConfigData
from src.lingomate.runtime.config.config_template import load_templated_yaml

CONFIG_PATH_ENV = "LINGOMATE_CONFIG"


@dataclass
class AppContext:
    config: ConfigData


_app_context: ContextVar[AppContext] = ContextVar(
    "lingomate_context",
    default=AppContext(
        config=load_templated_yaml(Path(os.getenv(CONFIG_PATH_ENV, "config.yaml")))
    ),
)


def get_context() -> AppContext:
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    return _app_context.set(context)


def _deep_merge(base: dict, overrides: dict) -> dict:
    merged = dict(base)
    for key, value in overrides.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


@contextmanager
def with_context(config_override: ConfigData | dict | None = None):
    """Temporarily swap the active configuration.

    A ``ConfigData`` is used as is. A nested ``dict`` is layered over the
    current configuration, so ``{"app": {"session_max_age": 60}}`` changes
    only that one value.
    """
    if config_override is None:
        yield
        return

    if isinstance(config_override, ConfigData):
        config = config_override
    elif isinstance(config_override, dict):
        config = ConfigData.model_validate(
            _deep_merge(get_config().model_dump(), config_override)
        )
    else:
        raise ValueError(
            f"config_override must be ConfigData, dict or None, got {type(config_override)}"
        )

    token = set_context(replace(get_context(), config=config))
    try:
        yield
    finally:
        _app_context.reset(token)


def get_config() -> ConfigData:
    return get_context().config
