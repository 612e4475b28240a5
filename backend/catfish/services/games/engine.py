"""Phase transition engine.

Every function takes the owned ``GameState`` and an emitter
``emit(event, payload=None, to=None)``; ``to`` addresses a single
connection, otherwise the event is broadcast. Callers serialize access.
"""

import logging
from typing import Any, Callable, Optional

from catfish.events import OutboundEvent
from catfish.models import GamePhase, RoundState
from .assignment import build_derangement
from .scoring import compile_reveal, score_round, tally_votes
from .state import GameState

logger = logging.getLogger(__name__)

Emitter = Callable[..., Any]

_NEXT_PHASE = {
    GamePhase.ASSIGNMENT: GamePhase.PROFILE_CREATION,
    GamePhase.PROFILE_CREATION: GamePhase.SABOTAGE,
    GamePhase.SABOTAGE: GamePhase.CHAT,
    GamePhase.CHAT: GamePhase.DECISION,
    GamePhase.DECISION: GamePhase.REVEAL,
}


def broadcast_tick(game: GameState, emit: Emitter) -> None:
    emit(OutboundEvent.TICK, game.clock.snapshot())


def broadcast_roster(game: GameState, emit: Emitter) -> None:
    broadcast_roster_to(game, emit, None)


def broadcast_roster_to(game: GameState, emit: Emitter, to: Optional[str]) -> None:
    emit(OutboundEvent.ROSTER_UPDATE, {'players': game.registry.roster(), 'host_id': game.registry.host_id}, to)


def start_round(game: GameState, emit: Emitter) -> None:
    """Begin the next round: fresh round state, targets, Assignment timer."""
    number = game.clock.next_round()
    players = game.registry.players()
    rnd = RoundState(number=number)
    rnd.assignments = build_derangement([p.id for p in players], game.rng)
    rnd.names = {p.id: p.name for p in players}
    rnd.sabotage_counts = {p.id: 0 for p in players}
    game.round = rnd
    logger.info(f"[round-start] round={number}/{game.clock.total_rounds} players={len(players)}")

    for creator_id, target_id in rnd.assignments.items():
        target = game.registry.get(target_id)
        emit(OutboundEvent.GAME_STARTED, {'round': number, 'target': target.to_dict() if target else None}, creator_id)

    game.clock.start(GamePhase.ASSIGNMENT, game.settings.duration_for(GamePhase.ASSIGNMENT))
    broadcast_tick(game, emit)


def tick(game: GameState, emit: Emitter) -> None:
    """One clock second: count down, advance on expiry, broadcast the tuple."""
    clock = game.clock
    if not clock.running:
        return
    if clock.countdown():
        logger.info(f"[timer-fire] round={clock.round} phase={clock.phase.value}")
        advance_phase(game, emit, expected=clock.phase)
    else:
        broadcast_tick(game, emit)


def advance_phase(game: GameState, emit: Emitter, expected: Optional[GamePhase] = None) -> bool:
    """Leave the current timed phase.

    ``expected`` names the phase the caller believes it is leaving; when the
    clock has already moved on, nothing happens. Returns True if a
    transition took place.
    """
    current = game.clock.phase
    if expected is not None and current != expected:
        logger.debug(f"[timer-abort] expected={expected.value} actual={current.value}")
        return False
    nxt = _NEXT_PHASE.get(current)
    if nxt is None or game.round is None:
        return False

    rnd = game.round
    if current == GamePhase.PROFILE_CREATION:
        emit(OutboundEvent.PROFILES_BROADCAST, {'profiles': rnd.profiles_dict()})
    elif current == GamePhase.SABOTAGE:
        for pid in game.active_participants():
            creator_id = rnd.creator_for(pid)
            profile = rnd.profiles.get(creator_id) if creator_id else None
            emit(OutboundEvent.CHAT_STARTED, {'catfish_profile': profile.to_dict() if profile else None}, pid)

    if nxt == GamePhase.REVEAL:
        _enter_reveal(game, emit)
        return True

    game.clock.start(nxt, game.settings.duration_for(nxt))
    logger.info(f"[phase] round={game.clock.round} {current.value} -> {nxt.value}")
    broadcast_tick(game, emit)
    return True


def _enter_reveal(game: GameState, emit: Emitter) -> None:
    rnd = game.round
    game.clock.halt(GamePhase.REVEAL)
    settings = game.settings
    round_scores = score_round(rnd, settings.agree_points, settings.sabotage_points)
    for pid, points in round_scores.items():
        game.registry.add_points(pid, points)

    creator_order = [pid for pid in game.registry.ids() if rnd.is_participant(pid)]
    players = game.registry.roster()
    entries = compile_reveal(rnd, creator_order, round_scores, players)
    logger.info(
        f"[reveal] round={rnd.number} entries={len(entries)} decisions={len(rnd.decisions)} "
        f"awarded={sum(round_scores.values())}"
    )
    emit(OutboundEvent.REVEAL_STARTED, {
        'round': rnd.number,
        'entries': entries,
        'round_scores': round_scores,
        'assignments': dict(rnd.assignments),
        'decisions': {pid: d.value for pid, d in rnd.decisions.items()},
        'players': players,
    })
    broadcast_tick(game, emit)


def close_voting(game: GameState, emit: Emitter) -> None:
    """Award vote points and route to Intermission or GameOver."""
    rnd = game.round
    if rnd is None or game.clock.phase != GamePhase.REVEAL:
        return
    for pid, points in tally_votes(rnd.votes, game.settings.vote_points).items():
        game.registry.add_points(pid, points)
    players = game.registry.roster()
    if game.clock.rounds_remaining:
        game.clock.halt(GamePhase.INTERMISSION)
        emit(OutboundEvent.INTERMISSION_STARTED, {'players': players, 'next_round': game.clock.round + 1})
    else:
        game.clock.halt(GamePhase.GAME_OVER)
        emit(OutboundEvent.GAME_OVER, {'players': players})
    logger.info(f"[vote-close] round={rnd.number} votes={len(rnd.votes)} next={game.clock.phase.value}")
    broadcast_tick(game, emit)


def check_completion(game: GameState, emit: Emitter) -> bool:
    """Advance early if every active participant is done with the current phase."""
    rnd = game.round
    active = game.active_participants()
    if rnd is None or not active:
        return False
    phase = game.clock.phase
    if phase == GamePhase.PROFILE_CREATION:
        done = all(pid in rnd.profiles for pid in active)
    elif phase == GamePhase.SABOTAGE:
        done = all(rnd.sabotage_counts.get(pid, 0) >= game.settings.sabotage_limit for pid in active)
    elif phase == GamePhase.DECISION:
        done = all(pid in rnd.decisions for pid in active)
    elif phase == GamePhase.REVEAL:
        if all(pid in rnd.votes for pid in active):
            close_voting(game, emit)
            return True
        return False
    else:
        return False
    if done:
        return advance_phase(game, emit, expected=phase)
    return False


def abort_to_lobby(game: GameState, emit: Emitter) -> None:
    """Tear the round down after the roster fell below the minimum."""
    logger.warning(
        f"[abort] round={game.clock.round} phase={game.clock.phase.value} players={len(game.registry)}"
    )
    game.clock.reset()
    game.round = None
    emit(OutboundEvent.GAME_ENDED, {})
    broadcast_tick(game, emit)
