"""Game engine facade.

:class:`GameEngine` wraps the turn generator and the executor with the
concerns hosts need: a bounded cache of enumerated turns, validated turn
application and optional invariant checking. The rules themselves live in
:mod:`mytikas.turn_generator` and :mod:`mytikas.executor`.
"""

from __future__ import annotations

import logging
from collections import OrderedDict

from .actions import Turn
from .config import EngineConfig, get_config
from .errors import IllegalTurnError
from .executor import execute_turn
from .metrics import TURN_CACHE_LOOKUPS, TURNS_APPLIED, TURNS_GENERATED
from .state import Position
from .turn_generator import generate_turns

__all__ = ["GameEngine"]

logger = logging.getLogger(__name__)


class GameEngine:
    """Turn enumeration and application for hosts.

    - ``get_valid_turns`` returns every legal turn for the side to move,
      memoized by position encoding.
    - ``apply_turn`` executes a turn, optionally checking it against the
      legal set first.
    """

    # Cache for valid turns: key = f"{canonical}:{encoding}"
    _turn_cache: OrderedDict[str, tuple[Turn, ...]] = OrderedDict()
    _cache_hits: int = 0
    _cache_misses: int = 0

    @staticmethod
    def get_valid_turns(
        position: Position, config: EngineConfig | None = None
    ) -> list[Turn]:
        """Return all legal turns for the side to move in ``position``.

        The returned list is a fresh copy; callers may mutate it freely.
        """
        if config is None:
            config = get_config()
        if not config.turn_cache:
            return GameEngine._generate(position, config)

        cache_key = f"{int(config.canonical_dual_attack)}:{position.encode()}"
        cached = GameEngine._turn_cache.get(cache_key)
        if cached is not None:
            GameEngine._cache_hits += 1
            TURN_CACHE_LOOKUPS.labels("hit").inc()
            GameEngine._turn_cache.move_to_end(cache_key)
            if config.debug_engine:
                logger.debug("turn cache hit for %s", cache_key)
            return list(cached)

        GameEngine._cache_misses += 1
        TURN_CACHE_LOOKUPS.labels("miss").inc()
        turns = GameEngine._generate(position, config)
        GameEngine._turn_cache[cache_key] = tuple(turns)
        while len(GameEngine._turn_cache) > config.turn_cache_max:
            GameEngine._turn_cache.popitem(last=False)
        return turns

    @staticmethod
    def _generate(position: Position, config: EngineConfig) -> list[Turn]:
        turns = generate_turns(
            position, canonical_dual_attack=config.canonical_dual_attack
        )
        TURNS_GENERATED.observe(len(turns))
        if config.debug_engine:
            logger.debug(
                "enumerated %d turns for %s", len(turns), position.encode()
            )
        return turns

    @staticmethod
    def clear_cache() -> None:
        """Clear the turn cache"""
        GameEngine._turn_cache.clear()
        GameEngine._cache_hits = 0
        GameEngine._cache_misses = 0

    @staticmethod
    def cache_stats() -> dict[str, int]:
        return {
            "size": len(GameEngine._turn_cache),
            "hits": GameEngine._cache_hits,
            "misses": GameEngine._cache_misses,
        }

    @staticmethod
    def is_legal(
        position: Position, turn: Turn, config: EngineConfig | None = None
    ) -> bool:
        return turn in GameEngine.get_valid_turns(position, config)

    @staticmethod
    def apply_turn(
        position: Position,
        turn: Turn,
        *,
        in_place: bool = False,
        validate: bool = False,
        config: EngineConfig | None = None,
    ) -> Position:
        """Apply ``turn`` and return the resulting position.

        Args:
            position: Position to play from.
            turn: Turn for the side to move.
            in_place: Mutate ``position`` instead of working on a copy.
            validate: Check ``turn`` against the legal turn set first. The
                check happens before any mutation, so a rejected turn leaves
                ``position`` untouched.
            config: Engine configuration; defaults to :func:`get_config`.

        Raises:
            IllegalTurnError: ``validate`` is set and the turn is not legal,
                or the game is already over.
            InvalidStateError: strict invariants are enabled and the result
                is inconsistent.
        """
        if config is None:
            config = get_config()
        if position.is_over:
            raise IllegalTurnError(
                "game is already over",
                turn=turn.encode(),
                position=position.encode(),
            )
        if validate and not GameEngine.is_legal(position, turn, config):
            logger.info("rejected illegal turn %s", turn.encode())
            raise IllegalTurnError(
                "turn is not legal in this position",
                turn=turn.encode(),
                position=position.encode(),
            )

        before = position.encode() if config.debug_engine else None
        result = position if in_place else position.copy()
        execute_turn(result, turn)
        TURNS_APPLIED.labels(str(validate).lower()).inc()

        if config.strict_invariants:
            result.check_invariants()
        if config.debug_engine:
            logger.debug(
                "applied %s: %s -> %s", turn.encode(), before, result.encode()
            )
        return result
