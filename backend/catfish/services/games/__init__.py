"""Game domain services: round state, clock, transitions and scoring.

This package contains the pure(ish) game mechanics. Socket handlers and HTTP
routes call into ``GameCoordinator``; nothing in here imports Flask.
"""

from .coordinator import GameCoordinator
from .state import GameSettings, GameState

__all__ = ['GameCoordinator', 'GameSettings', 'GameState']
