from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar, Token
from dataclasses import dataclass, replace

from loguru import logger

from catalog.runtime.config.config_data import ConfigData
from catalog.runtime.config.config_template import load_templated_yaml
from catalog.runtime.settings import EnvironmentVariables


@dataclass
class AppContext:
    """Application context containing configuration and other app-wide state."""

    config: ConfigData


def load_default_config() -> ConfigData:
    """Load config.yaml (or CATALOG_CONFIG_FILE), falling back to model defaults."""
    env_vars = EnvironmentVariables()
    if not env_vars.config_file.exists():
        logger.warning(
            "Configuration file {} not found; using built-in defaults",
            env_vars.config_file,
        )
        return ConfigData()
    return load_templated_yaml(env_vars.config_file, env_mode=env_vars.environment)


_default_context = AppContext(config=load_default_config())

_app_context: ContextVar[AppContext] = ContextVar(
    "app_context", default=_default_context
)


def get_context() -> AppContext:
    """Get the current application context."""
    return _app_context.get()


def set_context(context: AppContext) -> Token[AppContext]:
    """Set the current application context."""
    return _app_context.set(context)


def set_config(config: ConfigData) -> None:
    """Replace the current application configuration."""
    set_context(replace(get_context(), config=config))


def get_config() -> ConfigData:
    """Convenience function to get the current configuration."""
    return get_context().config


@contextmanager
def with_context(config_override: ConfigData | None = None) -> Iterator[ConfigData]:
    """Temporarily swap the active configuration.

    Build overrides from the current config so untouched sections carry over::

        override = get_config().model_copy(
            update={"app": AppConfig(environment="production")}
        )
        with with_context(override):
            assert get_config().app.environment == "production"
    """
    if config_override is None:
        yield get_config()
        return

    if not isinstance(config_override, ConfigData):
        raise ValueError(
            f"config_override must be ConfigData, or None, got {type(config_override)}"
        )

    token = set_context(replace(get_context(), config=config_override))
    try:
        yield config_override
    finally:
        _app_context.reset(token)
