from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace
from pathlib import Path

from loguru import logger
from pydantic import BaseModel

from src.library.runtime.config.config_data import ConfigData
from src.library.runtime.config.config_template import load_templated_yaml
from src.library.runtime.config.settings import get_environment


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


def load_default_config() -> ConfigData:
    """Load the configuration named by ``LIBRARY_CONFIG_FILE``.

    A missing file falls back to built-in defaults. ``DATABASE_URL`` and
    ``APP_ENVIRONMENT`` always take precedence over the file.
    """
    env = get_environment()
    path = Path(env.library_config_file)
    if path.exists():
        config = load_templated_yaml(path)
    else:
        logger.warning("Configuration file {} not found, using defaults", path)
        config = ConfigData()

    if env.database_url:
        config.database.url = env.database_url
    if "app_environment" in env.model_fields_set:
        config.app.environment = env.app_environment
    return config


_default_context = AppContext(config=load_default_config())

_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=_default_context
)


def get_context() -> AppContext:
    """Get the current application context."""
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Set the current application context.

    Args:
        context: AppContext instance to set as current.
    """
    return _app_context.set(context)


def _dump_explicitly_set(model: BaseModel) -> dict:
    """Dump only the fields that were explicitly set, at every nesting level."""
    result = {}
    for field_name in model.__class__.model_fields:
        value = getattr(model, field_name)
        if isinstance(value, BaseModel):
            nested = _dump_explicitly_set(value)
            if nested:
                result[field_name] = nested
            elif field_name in model.model_fields_set:
                result[field_name] = value.model_dump()
        elif field_name in model.model_fields_set:
            result[field_name] = value
    return result


def _recursive_dict_merge(base_dict: dict, override_dict: dict) -> dict:
    result = base_dict.copy()
    for key, value in override_dict.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _recursive_dict_merge(result[key], value)
        else:
            result[key] = value
    return result


def merge_configs(base_config: ConfigData, override_config: ConfigData) -> ConfigData:
    """Merge the explicitly set fields of ``override_config`` into ``base_config``."""
    merged = _recursive_dict_merge(
        base_config.model_dump(exclude={"database": {"password", "connection_string"}}),
        _dump_explicitly_set(override_config),
    )
    return ConfigData.model_validate(merged)


@contextmanager
def with_context(config_override: ConfigData | None = None) -> Iterator[None]:
    """Temporarily override the application configuration.

    Only the fields explicitly set on ``config_override`` replace the current
    values; everything else is inherited.

    Example:
        with with_context(ConfigData(app=AppConfig(legacy_error_mapping=True))):
            assert get_config().app.legacy_error_mapping
    """
    if config_override is None:
        yield
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    merged_config = merge_configs(get_context().config, config_override)
    token = set_context(replace(get_context(), config=merged_config))
    try:
        yield
    finally:
        _app_context.reset(token)


def get_config() -> ConfigData:
    """Convenience function to get the current configuration."""
    return get_context().config
