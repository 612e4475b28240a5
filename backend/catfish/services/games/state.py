import random
from dataclasses import dataclass
from typing import List, Mapping, Optional

from catfish.models import GamePhase, IDLE_PHASES, RoundState, TIMED_PHASES
from catfish.registry import ConnectionRegistry
from .clock import PhaseClock


@dataclass(frozen=True)
class GameSettings:
    assignment_sec: int = 15
    profile_creation_sec: int = 90
    sabotage_sec: int = 60
    chat_sec: int = 120
    decision_sec: int = 30
    total_rounds: int = 3
    min_players: int = 2
    sabotage_limit: int = 3
    agree_points: int = 1000
    sabotage_points: int = 250
    vote_points: int = 200

    def __post_init__(self):
        for name in ('assignment_sec', 'profile_creation_sec', 'sabotage_sec', 'chat_sec', 'decision_sec'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be a positive number of seconds, got {getattr(self, name)}")
        if self.total_rounds < 1:
            raise ValueError(f"total_rounds must be at least 1, got {self.total_rounds}")
        if self.min_players < 2:
            raise ValueError(f"min_players must be at least 2, got {self.min_players}")

    @classmethod
    def from_config(cls, config: Mapping) -> 'GameSettings':
        defaults = cls()
        return cls(
            assignment_sec=int(config.get('ASSIGNMENT_DURATION_SEC', defaults.assignment_sec)),
            profile_creation_sec=int(config.get('PROFILE_CREATION_DURATION_SEC', defaults.profile_creation_sec)),
            sabotage_sec=int(config.get('SABOTAGE_DURATION_SEC', defaults.sabotage_sec)),
            chat_sec=int(config.get('CHAT_DURATION_SEC', defaults.chat_sec)),
            decision_sec=int(config.get('DECISION_DURATION_SEC', defaults.decision_sec)),
            total_rounds=int(config.get('TOTAL_ROUNDS', defaults.total_rounds)),
            min_players=int(config.get('MIN_PLAYERS', defaults.min_players)),
            sabotage_limit=int(config.get('SABOTAGE_LIMIT', defaults.sabotage_limit)),
            agree_points=int(config.get('AGREE_POINTS', defaults.agree_points)),
            sabotage_points=int(config.get('SABOTAGE_POINTS', defaults.sabotage_points)),
            vote_points=int(config.get('VOTE_POINTS', defaults.vote_points)),
        )

    def duration_for(self, phase: GamePhase) -> int:
        return {
            GamePhase.ASSIGNMENT: self.assignment_sec,
            GamePhase.PROFILE_CREATION: self.profile_creation_sec,
            GamePhase.SABOTAGE: self.sabotage_sec,
            GamePhase.CHAT: self.chat_sec,
            GamePhase.DECISION: self.decision_sec,
        }.get(phase, 0)

    def durations(self):
        return {
            GamePhase.ASSIGNMENT.value: self.assignment_sec,
            GamePhase.PROFILE_CREATION.value: self.profile_creation_sec,
            GamePhase.SABOTAGE.value: self.sabotage_sec,
            GamePhase.CHAT.value: self.chat_sec,
            GamePhase.DECISION.value: self.decision_sec,
        }


class GameState:
    """The single owned game state: roster, clock and the current round."""

    def __init__(self, settings: GameSettings, rng: Optional[random.Random] = None):
        self.settings = settings
        self.registry = ConnectionRegistry()
        self.clock = PhaseClock(total_rounds=settings.total_rounds)
        self.round: Optional[RoundState] = None
        self.rng = rng or random.Random()

    @property
    def phase(self) -> GamePhase:
        return self.clock.phase

    @property
    def round_active(self) -> bool:
        return self.clock.phase not in IDLE_PHASES

    @property
    def round_in_play(self) -> bool:
        """True from Assignment through Reveal, while the round's participants matter."""
        return self.clock.phase in TIMED_PHASES or self.clock.phase == GamePhase.REVEAL

    def active_participants(self) -> List[str]:
        """Connected players taking part in the current round."""
        if self.round is None:
            return []
        return [pid for pid in self.registry.ids() if self.round.is_participant(pid)]

    def is_active_participant(self, player_id: str) -> bool:
        return self.round is not None and player_id in self.registry and self.round.is_participant(player_id)

    def snapshot(self):
        payload = self.clock.snapshot()
        payload['players'] = self.registry.roster()
        payload['host_id'] = self.registry.host_id
        payload['durations'] = self.settings.durations()
        return payload
