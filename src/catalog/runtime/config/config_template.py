"""Load ``config.yaml`` with ``${VAR}`` placeholders filled from the environment."""

import os
import re
from pathlib import Path

import yaml
from dotenv import load_dotenv
from loguru import logger
from pydantic import ValidationError

from catalog.runtime.config.config_data import ConfigData

# ${NAME}, ${NAME:-default} or ${NAME:?message}
_PLACEHOLDER = re.compile(
    r"\$\{(?P<name>[A-Za-z_][A-Za-z0-9_]*)(?:(?P<op>:[-?])(?P<arg>[^}]*))?\}"
)


class MissingVariableError(ValueError):
    """A placeholder without a default names an unset variable."""

    def __init__(self, name: str, hint: str | None = None) -> None:
        message = (
            f"Required environment variable {name}: {hint}"
            if hint
            else f"Required environment variable {name} not set"
        )
        super().__init__(message)
        self.name = name


def _resolve(match: re.Match[str]) -> str:
    name, op, arg = match.group("name", "op", "arg")
    value = os.environ.get(name)
    if value is not None:
        return value
    if op == ":-":
        return arg
    raise MissingVariableError(name, arg if op == ":?" else None)


def substitute_env_vars(text: str) -> str:
    """Replace every placeholder in ``text``.

    Unset variables fall back to the ``:-`` default. Without one they raise
    ``MissingVariableError``, carrying the ``:?`` message when given.
    """
    return _PLACEHOLDER.sub(_resolve, text)


def environment_overrides(env_mode: str) -> dict[str, str]:
    """Map unprefixed names to the values of their ``<ENV>_``-prefixed variables."""
    prefix = f"{env_mode.upper()}_"
    return {
        var[len(prefix):]: value
        for var, value in os.environ.items()
        if var.startswith(prefix) and len(var) > len(prefix)
    }


def apply_environment_overrides(env_mode: str) -> None:
    """Promote ``<ENV>_``-prefixed variables to their unprefixed names.

    ``PRODUCTION_DATABASE_URL`` becomes ``DATABASE_URL`` when running in
    production, so one .env file can carry settings for every environment.
    """
    overrides = environment_overrides(env_mode)
    if overrides:
        logger.info("Applying {} overrides for: {}", env_mode, sorted(overrides))
    os.environ.update(overrides)


def _parse(text: str, source: Path) -> dict:
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValueError(f"Error parsing YAML in {source}: {e}") from e
    if not loaded:
        raise ValueError(f"Configuration file {source} is empty")
    return loaded.get("config") or {}


def load_templated_yaml(file_path: Path, env_mode: str = "development") -> ConfigData:
    """Read, substitute and validate the catalog configuration file.

    ``.env`` values are loaded first without overriding the real environment,
    then ``<ENV>_`` overrides for ``env_mode`` are applied.

    Raises:
        FileNotFoundError: If ``file_path`` does not exist.
        ValueError: On a missing required variable, unparsable or empty
            YAML, or values that fail validation.
    """
    template = Path(file_path).read_text()

    load_dotenv(override=False)
    logger.info("Loading configuration from {} ({})", file_path, env_mode)
    apply_environment_overrides(env_mode)

    section = _parse(substitute_env_vars(template), Path(file_path))
    try:
        return ConfigData(**section)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
