"""Configuration: frozen Config resolved from the environment."""

from __future__ import annotations

from dataclasses import dataclass
from functools import cache
import logging
import os

from dotenv import find_dotenv, load_dotenv

from transaction_helpers.exceptions import ConfigurationError

log = logging.getLogger(__name__)

_ENV_PREFIX = "TRANSACTION_HELPERS_"
_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"0", "false", "no", "off", ""})

DEFAULT_EMPTY_RESULT_MESSAGE = "The result has no value."


@dataclass(frozen=True)
class Config:
    """Immutable library configuration.

    Example:
        config = Config(json_indent=2, exclude_none=True)
        payload = result.to_json(config=config)
    """

    #: Indentation for ``to_json``; *None* produces compact output.
    json_indent: int | None = None
    #: Drop null ``message``/``code``/``detail``/``value`` fields from dumps.
    exclude_none: bool = False
    empty_result_message: str = DEFAULT_EMPTY_RESULT_MESSAGE

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.json_indent is not None and self.json_indent < 0:
            raise ConfigurationError(
                f"json_indent must be ≥ 0, got {self.json_indent}",
                hint="Use None for compact JSON output.",
            )
        if not isinstance(self.empty_result_message, str) or not (
            self.empty_result_message.strip()
        ):
            raise ConfigurationError(
                "empty_result_message must be a non-empty string",
                hint=f"Set {_ENV_PREFIX}EMPTY_RESULT_MESSAGE or leave it unset.",
            )

    @classmethod
    def from_env(cls, *, dotenv: bool = False) -> Config:
        """Build a Config from ``TRANSACTION_HELPERS_*`` environment variables.

        With *dotenv*, the nearest ``.env`` file above the working directory
        is loaded first; variables already present in the process environment
        win. Without it nothing is read from disk.
        """
        if dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        indent_raw = os.environ.get(f"{_ENV_PREFIX}JSON_INDENT")
        json_indent: int | None = None
        if indent_raw is not None and indent_raw.strip():
            try:
                json_indent = int(indent_raw)
            except ValueError as exc:
                raise ConfigurationError(
                    f"{_ENV_PREFIX}JSON_INDENT must be an integer, got {indent_raw!r}",
                    hint="Example: TRANSACTION_HELPERS_JSON_INDENT=2",
                ) from exc

        exclude_none = _parse_bool(
            f"{_ENV_PREFIX}EXCLUDE_NONE",
            os.environ.get(f"{_ENV_PREFIX}EXCLUDE_NONE", ""),
        )
        message = os.environ.get(
            f"{_ENV_PREFIX}EMPTY_RESULT_MESSAGE", DEFAULT_EMPTY_RESULT_MESSAGE
        )

        config = cls(
            json_indent=json_indent,
            exclude_none=exclude_none,
            empty_result_message=message,
        )
        log.debug("Resolved configuration: %s", config)
        return config


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(
        f"{name} must be a boolean, got {raw!r}",
        hint="Use one of: 1, 0, true, false, yes, no, on, off.",
    )


_active: Config | None = None


def get_config() -> Config:
    """Return the process-wide configuration.

    A config installed with ``set_config`` wins; otherwise the process
    environment is resolved once and cached. ``.env`` files are never read
    here; use ``set_config(Config.from_env(dotenv=True))`` for that.
    """
    if _active is not None:
        return _active
    return _env_config()


@cache
def _env_config() -> Config:
    return Config.from_env()


def set_config(config: Config | None) -> None:
    """Install *config* as the process-wide configuration (None removes it)."""
    global _active
    _active = config


def reset_config() -> None:
    """Drop any installed config and the cached environment lookup."""
    set_config(None)
    _env_config.cache_clear()
