from flask import current_app, request
from flask_socketio import emit

from catfish import socketio
from catfish.events import InboundAction, NAMESPACE, OutboundEvent
from catfish.services.images import search_photos


def emit_event(event: OutboundEvent, payload=None, to=None) -> None:
    """Emit an engine event; ``to`` targets one sid, otherwise broadcast."""
    # Use socketio.emit since this is also called from the clock's background task
    socketio.emit(event.value, payload if payload is not None else {}, to=to, namespace=NAMESPACE)


def _coordinator():
    return current_app.extensions['catfish']


def _get_sid() -> str:
    return request.sid  # type: ignore


def handle_connect(auth=None):
    emit(OutboundEvent.CONNECTED.value, {'id': _get_sid()})
    _coordinator().connect(_get_sid())


def handle_disconnect(reason=None):
    _coordinator().disconnect(_get_sid())


def handle_join_lobby(data=None):
    # Older clients send the bare name instead of {'name': ...}
    name = data.get('name') if isinstance(data, dict) else data
    _coordinator().join(_get_sid(), name)


def handle_start_game(data=None):
    _coordinator().start_game(_get_sid())


def handle_submit_profile(data=None):
    _coordinator().submit_profile(_get_sid(), data)


def handle_sabotage_action(data=None):
    _coordinator().sabotage(_get_sid(), data)


def handle_submit_decision(data=None):
    _coordinator().submit_decision(_get_sid(), data)


def handle_submit_vote(data=None):
    _coordinator().submit_vote(_get_sid(), data)


def handle_request_next_round(data=None):
    _coordinator().request_next_round(_get_sid())


def handle_send_message(data=None):
    _coordinator().send_message(_get_sid(), data)


def handle_search_images(data=None):
    term = data.get('term') if isinstance(data, dict) else data
    app = current_app._get_current_object()
    sid = _get_sid()

    def _runner(search_term, reply_to):
        results = search_photos(
            search_term,
            app.config.get('PEXELS_API_KEY'),
            url=app.config.get('IMAGE_SEARCH_URL', 'https://api.pexels.com/v1/search'),
            page_size=int(app.config.get('IMAGE_SEARCH_PAGE_SIZE', 15)),
            timeout=float(app.config.get('IMAGE_SEARCH_TIMEOUT_SEC', 10)),
            transport=app.config.get('IMAGE_SEARCH_TRANSPORT'),
        )
        app.logger.info(f"[image-search] sid={reply_to} term={search_term!r} results={len(results)}")
        emit_event(OutboundEvent.IMAGE_RESULTS, {'results': results}, reply_to)

    # Inline in tests for determinism; in prod keep the clock and other handlers moving
    if app.config.get('TESTING'):
        _runner(term, sid)
    else:
        socketio.start_background_task(_runner, term, sid)


_HANDLERS = {
    InboundAction.JOIN_LOBBY: handle_join_lobby,
    InboundAction.START_GAME: handle_start_game,
    InboundAction.SUBMIT_PROFILE: handle_submit_profile,
    InboundAction.SABOTAGE_ACTION: handle_sabotage_action,
    InboundAction.SUBMIT_DECISION: handle_submit_decision,
    InboundAction.SUBMIT_VOTE: handle_submit_vote,
    InboundAction.REQUEST_NEXT_ROUND: handle_request_next_round,
    InboundAction.SEND_MESSAGE: handle_send_message,
    InboundAction.SEARCH_IMAGES: handle_search_images,
}


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the '/ws' namespace."""
    missing = set(InboundAction) - set(_HANDLERS)
    if missing:
        raise RuntimeError(f"No handler for inbound actions: {sorted(a.value for a in missing)}")
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('disconnect', handle_disconnect, namespace=NAMESPACE)
    for action, handler in _HANDLERS.items():
        socketio.on_event(action.value, handler, namespace=NAMESPACE)
