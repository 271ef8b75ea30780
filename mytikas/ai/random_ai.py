"""Random AI implementation for Mytikas.

This agent selects uniformly random legal turns using the per-instance RNG
on the :class:`BaseAI`. It is intended for testing, self-play soaks and
baselines rather than competitive play.
"""

from __future__ import annotations

from ..actions import Turn
from ..state import Position
from .base import BaseAI


class RandomAI(BaseAI):
    """AI that selects random legal turns."""

    def select_turn(self, position: Position) -> Turn | None:
        """Select a random legal turn for ``position``.

        Returns:
            A random legal :class:`Turn`, or ``None`` once the game is over.
        """
        valid_turns = self.get_valid_turns(position)

        if not valid_turns:
            return None

        selected = self.get_random_element(valid_turns)

        self.turn_count += 1
        return selected

    def evaluate_position(self, position: Position) -> float:
        """Return a small random evaluation for ``position``.

        RandomAI does not attempt to evaluate positions meaningfully, except
        that a decided game scores +/-1 for the winner/loser.
        """
        winner = position.winner
        if winner is not None:
            return 1.0 if winner == self.player else -1.0
        return self.rng.uniform(-0.1, 0.1)
