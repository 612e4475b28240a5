import logging
import threading
from typing import Any, Callable, Optional

from catfish.events import OutboundEvent
from catfish.models import (
    CatfishProfile,
    Decision,
    GamePhase,
    LIST_FIELDS,
    Message,
    PROFILE_LIST_SIZE,
    SABOTAGE_FIELDS,
    SabotageAction,
)
from . import engine
from .state import GameSettings, GameState

logger = logging.getLogger(__name__)

NAME_MAX_LEN = 32


def _ignored(action: str, player_id: str, reason: str) -> None:
    logger.debug(f"[ignored] action={action} player={player_id} reason={reason}")


class GameCoordinator:
    """Serializes player actions and clock ticks onto one ``GameState``.

    Every public method takes the lock for its whole duration, applies the
    action, and emits the resulting events through ``emit``. Invalid, late or
    duplicate actions are dropped without raising.
    """

    def __init__(
        self,
        settings: GameSettings,
        emit: Callable[..., Any],
        schedule: Optional[Callable[['GameCoordinator', int], None]] = None,
        rng=None,
    ):
        self.state = GameState(settings, rng=rng)
        self._emit = emit
        self._schedule = schedule
        self._lock = threading.RLock()
        self.state.clock.on_start = self._on_clock_start

    def _on_clock_start(self, generation: int) -> None:
        if self._schedule is not None:
            self._schedule(self, generation)

    # ---- Clock ----

    def tick(self, generation: Optional[int] = None) -> bool:
        """Advance the clock by one second.

        Returns False once the clock is stopped or restarted under a newer
        generation, telling the driver loop to exit.
        """
        with self._lock:
            clock = self.state.clock
            if not clock.running or (generation is not None and generation != clock.generation):
                return False
            engine.tick(self.state, self._emit)
            return clock.running and (generation is None or generation == clock.generation)

    def snapshot(self):
        with self._lock:
            return self.state.snapshot()

    # ---- Connection lifecycle ----

    def connect(self, player_id: str) -> None:
        with self._lock:
            engine.broadcast_roster_to(self.state, self._emit, player_id)
            self._emit(OutboundEvent.TICK, self.state.clock.snapshot(), player_id)

    def join(self, player_id: str, name: Any) -> None:
        with self._lock:
            if isinstance(name, str) and name.strip():
                if self.state.registry.add(player_id, name.strip()[:NAME_MAX_LEN]):
                    logger.info(f"[join] player={player_id} name={name.strip()[:NAME_MAX_LEN]!r}")
            else:
                _ignored('join_lobby', player_id, 'blank name')
            engine.broadcast_roster(self.state, self._emit)

    def disconnect(self, player_id: str) -> None:
        with self._lock:
            game = self.state
            if game.registry.remove(player_id) is None:
                return
            logger.info(f"[leave] player={player_id} remaining={len(game.registry)} host={game.registry.host_id}")
            engine.broadcast_roster(game, self._emit)
            if game.round_active and len(game.registry) < game.settings.min_players:
                engine.abort_to_lobby(game, self._emit)
                return
            # Late joiners can keep the roster full after the round's own players are gone
            if game.round_in_play and len(game.active_participants()) < game.settings.min_players:
                engine.abort_to_lobby(game, self._emit)
                return
            engine.check_completion(game, self._emit)

    # ---- Round control ----

    def start_game(self, player_id: str) -> None:
        with self._lock:
            game = self.state
            if game.round_active:
                return _ignored('start_game', player_id, 'round in progress')
            if player_id not in game.registry:
                return _ignored('start_game', player_id, 'not joined')
            if len(game.registry) < game.settings.min_players:
                return _ignored('start_game', player_id, 'not enough players')
            game.clock.reset()
            game.registry.reset_scores()
            logger.info(f"[game-start] by={player_id} players={len(game.registry)}")
            engine.start_round(game, self._emit)

    def request_next_round(self, player_id: str) -> None:
        with self._lock:
            game = self.state
            if not game.registry.is_host(player_id):
                return _ignored('request_next_round', player_id, 'not host')
            if game.phase != GamePhase.INTERMISSION:
                return _ignored('request_next_round', player_id, f'phase={game.phase.value}')
            engine.start_round(game, self._emit)

    # ---- Submissions ----

    def submit_profile(self, player_id: str, data: Any) -> None:
        with self._lock:
            game = self.state
            if game.phase != GamePhase.PROFILE_CREATION or not game.is_active_participant(player_id):
                return _ignored('submit_profile', player_id, f'phase={game.phase.value}')
            if player_id in game.round.profiles:
                return _ignored('submit_profile', player_id, 'duplicate')
            profile = CatfishProfile.from_payload(player_id, data)
            if profile is None:
                return _ignored('submit_profile', player_id, 'malformed')
            game.round.profiles[player_id] = profile
            engine.check_completion(game, self._emit)

    def sabotage(self, player_id: str, data: Any) -> None:
        with self._lock:
            game = self.state
            rnd = game.round
            if game.phase != GamePhase.SABOTAGE or not game.is_active_participant(player_id):
                return _ignored('sabotage_action', player_id, f'phase={game.phase.value}')
            if rnd.sabotage_counts.get(player_id, 0) >= game.settings.sabotage_limit:
                return _ignored('sabotage_action', player_id, 'quota exhausted')
            if not isinstance(data, dict):
                return _ignored('sabotage_action', player_id, 'malformed')
            creator_id = data.get('target_creator_id')
            field = data.get('field')
            new_value = data.get('new_value')
            index = data.get('index')
            profile = rnd.profiles.get(creator_id) if isinstance(creator_id, str) else None
            if profile is None or creator_id == player_id:
                return _ignored('sabotage_action', player_id, 'no such profile')
            if field not in SABOTAGE_FIELDS or not isinstance(new_value, str):
                return _ignored('sabotage_action', player_id, 'bad field')
            if field in LIST_FIELDS:
                if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < PROFILE_LIST_SIZE:
                    return _ignored('sabotage_action', player_id, 'bad index')
            else:
                index = None

            action = SabotageAction(
                sabotager_id=player_id,
                sabotager_name=game.registry.name_of(player_id) or '',
                creator_id=creator_id,
                field=field,
                index=index,
                old_value=profile.get_field(field, index),
                new_value=new_value,
            )
            profile.set_field(field, new_value, index)
            rnd.sabotage_log.setdefault(creator_id, []).append(action)
            rnd.sabotage_counts[player_id] = rnd.sabotage_counts.get(player_id, 0) + 1
            self._emit(OutboundEvent.PROFILES_UPDATED, {'profiles': rnd.profiles_dict()})
            engine.check_completion(game, self._emit)

    def send_message(self, player_id: str, data: Any) -> None:
        with self._lock:
            game = self.state
            if game.phase != GamePhase.CHAT or not game.is_active_participant(player_id):
                return _ignored('send_message', player_id, f'phase={game.phase.value}')
            if not isinstance(data, dict):
                return _ignored('send_message', player_id, 'malformed')
            recipient_id = data.get('recipient_id')
            text = data.get('text')
            if not isinstance(text, str) or not text.strip():
                return _ignored('send_message', player_id, 'empty text')
            if not isinstance(recipient_id, str) or recipient_id == player_id or not game.is_active_participant(recipient_id):
                return _ignored('send_message', player_id, 'bad recipient')
            game.round.messages.append(Message(sender_id=player_id, recipient_id=recipient_id, text=text))
            self._emit(OutboundEvent.MESSAGE_RECEIVED, {'sender_id': player_id, 'text': text}, recipient_id)

    def submit_decision(self, player_id: str, data: Any) -> None:
        with self._lock:
            game = self.state
            if game.phase != GamePhase.DECISION or not game.is_active_participant(player_id):
                return _ignored('submit_decision', player_id, f'phase={game.phase.value}')
            if player_id in game.round.decisions:
                return _ignored('submit_decision', player_id, 'duplicate')
            raw = data.get('decision') if isinstance(data, dict) else None
            try:
                decision = Decision(raw)
            except (TypeError, ValueError):
                return _ignored('submit_decision', player_id, f'bad decision {raw!r}')
            game.round.decisions[player_id] = decision
            engine.check_completion(game, self._emit)

    def submit_vote(self, player_id: str, data: Any) -> None:
        with self._lock:
            game = self.state
            if game.phase != GamePhase.REVEAL or not game.is_active_participant(player_id):
                return _ignored('submit_vote', player_id, f'phase={game.phase.value}')
            if player_id in game.round.votes:
                return _ignored('submit_vote', player_id, 'duplicate')
            voted_for = data.get('voted_for_id') if isinstance(data, dict) else None
            if not isinstance(voted_for, str) or voted_for == player_id or voted_for not in game.registry:
                return _ignored('submit_vote', player_id, 'bad candidate')
            game.round.votes[player_id] = voted_for
            engine.check_completion(game, self._emit)
