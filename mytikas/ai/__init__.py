"""AI players for Mytikas.

Players consume the engine only through :mod:`mytikas.api`; they never
reason about the rules themselves.

    from mytikas.ai import RandomAI

    ai = RandomAI(Player.LIGHT, seed=42)
    turn = ai.select_turn(position)

- base.py: BaseAI abstract base class with a per-instance random source
- random_ai.py: uniformly random legal turns
"""

from .base import BaseAI
from .random_ai import RandomAI

__all__ = ["BaseAI", "RandomAI"]
