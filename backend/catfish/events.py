"""Socket.IO event names.

Both directions are closed enumerations; the gateway registers exactly one
handler per ``InboundAction`` and the engine only ever emits
``OutboundEvent`` members.
"""

from enum import Enum


NAMESPACE = '/ws'


class InboundAction(str, Enum):
    JOIN_LOBBY = 'join_lobby'
    START_GAME = 'start_game'
    SUBMIT_PROFILE = 'submit_profile'
    SABOTAGE_ACTION = 'sabotage_action'
    SUBMIT_DECISION = 'submit_decision'
    SUBMIT_VOTE = 'submit_vote'
    REQUEST_NEXT_ROUND = 'request_next_round'
    SEND_MESSAGE = 'send_message'
    SEARCH_IMAGES = 'search_images'


class OutboundEvent(str, Enum):
    CONNECTED = 'connected'
    ROSTER_UPDATE = 'roster_update'
    GAME_STARTED = 'game_started'  # targeted
    PROFILES_BROADCAST = 'profiles_broadcast'
    CHAT_STARTED = 'chat_started'  # targeted
    PROFILES_UPDATED = 'profiles_updated'
    MESSAGE_RECEIVED = 'message_received'  # targeted
    REVEAL_STARTED = 'reveal_started'
    INTERMISSION_STARTED = 'intermission_started'
    GAME_OVER = 'game_over'
    GAME_ENDED = 'game_ended'
    TICK = 'tick'
    IMAGE_RESULTS = 'image_results'  # targeted
