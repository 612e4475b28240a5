from typing import Callable, Optional

from catfish.models import GamePhase, TIMED_PHASES


class PhaseClock:
    """Authoritative game clock; the only holder of the current phase.

    ``generation`` changes every time the clock is started or stopped so a
    driver loop can tell whether it still owns the countdown.
    """

    def __init__(self, total_rounds: int, on_start: Optional[Callable[[int], None]] = None):
        self.phase = GamePhase.LOBBY
        self.time_left = 0
        self.duration = 0
        self.round = 0
        self.total_rounds = total_rounds
        self.running = False
        self.generation = 0
        self.on_start = on_start

    def start(self, phase: GamePhase, duration: int) -> None:
        """Enter a timed phase and (re)start ticking."""
        if phase not in TIMED_PHASES or duration <= 0:
            raise ValueError(f'{phase.value} needs a positive duration, got {duration}')
        was_running = self.running
        self.phase = phase
        self.duration = duration
        self.time_left = duration
        self.running = True
        if not was_running:
            self.generation += 1
            if self.on_start is not None:
                self.on_start(self.generation)

    def halt(self, phase: GamePhase) -> None:
        """Stop ticking and park in an untimed phase."""
        self.phase = phase
        self.duration = 0
        self.time_left = 0
        if self.running:
            self.running = False
            self.generation += 1

    def countdown(self) -> bool:
        """Consume one second; True when the current phase has expired."""
        self.time_left = max(0, self.time_left - 1)
        return self.time_left == 0

    def next_round(self) -> int:
        self.round += 1
        return self.round

    def reset(self) -> None:
        self.halt(GamePhase.LOBBY)
        self.round = 0

    @property
    def rounds_remaining(self) -> bool:
        return self.round < self.total_rounds

    def snapshot(self):
        return {
            'phase': self.phase.value,
            'time_left': self.time_left,
            'duration': self.duration,
            'round': self.round,
            'total_rounds': self.total_rounds,
        }
