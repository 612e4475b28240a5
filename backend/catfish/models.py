from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class GamePhase(str, Enum):
    LOBBY = 'Lobby'
    ASSIGNMENT = 'Assignment'
    PROFILE_CREATION = 'ProfileCreation'
    SABOTAGE = 'Sabotage'
    CHAT = 'Chat'
    DECISION = 'Decision'
    REVEAL = 'Reveal'
    INTERMISSION = 'Intermission'
    GAME_OVER = 'GameOver'


TIMED_PHASES = (
    GamePhase.ASSIGNMENT,
    GamePhase.PROFILE_CREATION,
    GamePhase.SABOTAGE,
    GamePhase.CHAT,
    GamePhase.DECISION,
)

# Phases in which no round is in play; start_game is only accepted here
IDLE_PHASES = (GamePhase.LOBBY, GamePhase.GAME_OVER)


class Decision(str, Enum):
    AGREE = 'agree'
    REJECT = 'reject'


PROFILE_LIST_SIZE = 3
SCALAR_FIELDS = ('fake_name', 'bio', 'image_url')
LIST_FIELDS = ('likes', 'dislikes')
SABOTAGE_FIELDS = SCALAR_FIELDS + LIST_FIELDS


@dataclass
class Player:
    id: str
    name: str
    joined_at: int
    score: int = 0

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'score': self.score,
        }


@dataclass
class CatfishProfile:
    creator_id: str
    fake_name: str
    bio: str
    likes: List[str]
    dislikes: List[str]
    image_url: str

    @classmethod
    def from_payload(cls, creator_id: str, data: Any) -> Optional['CatfishProfile']:
        """Build a profile from a client payload, or None if it is malformed."""
        if not isinstance(data, dict):
            return None
        fake_name = data.get('fake_name')
        if not isinstance(fake_name, str) or not fake_name.strip():
            return None
        likes = data.get('likes')
        dislikes = data.get('dislikes')
        for values in (likes, dislikes):
            if not isinstance(values, list) or len(values) != PROFILE_LIST_SIZE:
                return None
            if not all(isinstance(v, str) for v in values):
                return None
        bio = data.get('bio') or ''
        image_url = data.get('image_url') or ''
        if not isinstance(bio, str) or not isinstance(image_url, str):
            return None
        return cls(
            creator_id=creator_id,
            fake_name=fake_name.strip(),
            bio=bio,
            likes=list(likes),
            dislikes=list(dislikes),
            image_url=image_url,
        )

    def get_field(self, name: str, index: Optional[int] = None) -> str:
        if name in LIST_FIELDS:
            return getattr(self, name)[index]
        return getattr(self, name)

    def set_field(self, name: str, value: str, index: Optional[int] = None) -> None:
        if name in LIST_FIELDS:
            getattr(self, name)[index] = value
        else:
            setattr(self, name, value)

    def to_dict(self):
        return {
            'creator_id': self.creator_id,
            'fake_name': self.fake_name,
            'bio': self.bio,
            'likes': list(self.likes),
            'dislikes': list(self.dislikes),
            'image_url': self.image_url,
        }


@dataclass
class SabotageAction:
    sabotager_id: str
    sabotager_name: str
    creator_id: str
    field: str
    old_value: str
    new_value: str
    index: Optional[int] = None

    def to_dict(self):
        return {
            'sabotager_id': self.sabotager_id,
            'sabotager_name': self.sabotager_name,
            'creator_id': self.creator_id,
            'field': self.field,
            'index': self.index,
            'old_value': self.old_value,
            'new_value': self.new_value,
        }


@dataclass
class Message:
    sender_id: str
    recipient_id: str
    text: str

    def to_dict(self):
        return {
            'sender_id': self.sender_id,
            'recipient_id': self.recipient_id,
            'text': self.text,
        }


@dataclass
class RoundState:
    """Everything submitted during one round. Replaced wholesale at round start."""

    number: int
    assignments: Dict[str, str] = field(default_factory=dict)
    # Participant names captured at round start so the reveal survives disconnects
    names: Dict[str, str] = field(default_factory=dict)
    profiles: Dict[str, CatfishProfile] = field(default_factory=dict)
    sabotage_log: Dict[str, List[SabotageAction]] = field(default_factory=dict)
    sabotage_counts: Dict[str, int] = field(default_factory=dict)
    decisions: Dict[str, Decision] = field(default_factory=dict)
    votes: Dict[str, str] = field(default_factory=dict)
    messages: List[Message] = field(default_factory=list)

    @property
    def participants(self) -> List[str]:
        return list(self.assignments)

    def is_participant(self, player_id: str) -> bool:
        return player_id in self.assignments

    def creator_for(self, target_id: str) -> Optional[str]:
        """Return the creator whose target is ``target_id``."""
        for creator_id, assigned in self.assignments.items():
            if assigned == target_id:
                return creator_id
        return None

    def conversation(self, a: str, b: str) -> List[Message]:
        pair = {a, b}
        return [m for m in self.messages if {m.sender_id, m.recipient_id} == pair]

    def profiles_dict(self):
        return {cid: p.to_dict() for cid, p in self.profiles.items()}
