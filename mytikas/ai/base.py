"""
Base AI Player class for Mytikas
Abstract base class that all AI implementations inherit from
"""

from abc import ABC, abstractmethod
from typing import Optional, List, Any
import random

from ..actions import Turn
from ..api import enumerate_turns
from ..gods import Player
from ..state import Position


def derive_default_seed(player: Player) -> int:
    """
    Derive a deterministic fallback seed when the caller supplies neither a
    seed nor a random source.

    Callers that care about reproducibility across runs should pass ``seed``
    or ``rng`` explicitly instead of relying on this fallback.
    """
    return int(((int(player) + 1) * 97_911) & 0x7FFFFFFF)


class BaseAI(ABC):
    """Abstract base class for all AI implementations"""

    def __init__(
        self,
        player: Player,
        seed: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize AI player

        Args:
            player: The side this AI controls
            seed: Seed for the per-instance random source
            rng: Caller-owned random source; takes precedence over ``seed``
        """
        self.player = player
        self.turn_count = 0

        # All stochastic behaviour goes through this per-instance source so
        # that a game is reproducible from its seed. The engine itself never
        # draws random numbers.
        if rng is not None:
            self.rng_seed: Optional[int] = seed
            self.rng: random.Random = rng
        else:
            self.rng_seed = seed if seed is not None else derive_default_seed(player)
            self.rng = random.Random(self.rng_seed)

    @abstractmethod
    def select_turn(self, position: Position) -> Optional[Turn]:
        """
        Select a turn for the current position

        Args:
            position: Current position (with this AI's side to move)

        Returns:
            Selected turn or None if the game is over
        """
        pass

    @abstractmethod
    def evaluate_position(self, position: Position) -> float:
        """
        Evaluate the position from this AI's perspective

        Returns:
            Evaluation score (positive = good for this AI, negative = bad)
        """
        pass

    def get_valid_turns(self, position: Position) -> List[Turn]:
        return enumerate_turns(position)

    def get_random_element(self, items: List[Any]) -> Optional[Any]:
        """
        Get random element from list using the per-instance RNG.

        Returns:
            Random item or None if list is empty
        """
        if not items:
            return None
        return self.rng.choice(items)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(player={self.player.name.lower()})"
