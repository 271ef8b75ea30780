"""Engine configuration.

Settings are read once from ``MYTIKAS_*`` environment variables:

``MYTIKAS_CANONICAL_DUAL_ATTACK``
    Emit Hermes' double attacks in canonical target order only (default on).
``MYTIKAS_TURN_CACHE``
    Cache enumerated turns by position encoding (default on).
``MYTIKAS_TURN_CACHE_MAX``
    Maximum number of cached positions (default 4096).
``MYTIKAS_STRICT_INVARIANTS``
    Check position invariants after every applied turn (default off).
``MYTIKAS_DEBUG_ENGINE``
    Log engine internals at debug level (default off).
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Mapping

from pydantic import BaseModel, Field, ValidationError

from .errors import ConfigurationError

__all__ = ["EngineConfig", "get_config"]

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


def _parse_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ConfigurationError(
        f"{name} must be one of {sorted(_TRUTHY | _FALSY - {''})}",
        context={"variable": name, "value": raw},
    )


def _parse_int(env: Mapping[str, str], name: str, default: int) -> int:
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(
            f"{name} must be an integer",
            context={"variable": name, "value": raw},
        ) from None


class EngineConfig(BaseModel):
    """Runtime switches for the rules engine and its hosts."""

    canonical_dual_attack: bool = Field(True, alias="canonicalDualAttack")
    turn_cache: bool = Field(True, alias="turnCache")
    turn_cache_max: int = Field(4096, ge=1, alias="turnCacheMax")
    strict_invariants: bool = Field(False, alias="strictInvariants")
    debug_engine: bool = Field(False, alias="debugEngine")

    class Config:
        populate_by_name = True
        frozen = True

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> EngineConfig:
        """Build a config from ``env`` (defaults to ``os.environ``).

        Raises:
            ConfigurationError: if a variable holds an invalid value.
        """
        if env is None:
            env = os.environ
        values = {
            "canonical_dual_attack": _parse_flag(env, "MYTIKAS_CANONICAL_DUAL_ATTACK", True),
            "turn_cache": _parse_flag(env, "MYTIKAS_TURN_CACHE", True),
            "turn_cache_max": _parse_int(env, "MYTIKAS_TURN_CACHE_MAX", 4096),
            "strict_invariants": _parse_flag(env, "MYTIKAS_STRICT_INVARIANTS", False),
            "debug_engine": _parse_flag(env, "MYTIKAS_DEBUG_ENGINE", False),
        }
        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(
                "invalid engine configuration",
                context={"errors": [err["msg"] for err in e.errors()]},
            ) from e


@lru_cache(maxsize=1)
def get_config() -> EngineConfig:
    """Process-wide configuration, read from the environment on first use."""
    return EngineConfig.from_env()
