from collections import Counter
from enum import Enum
from typing import Dict, Iterable, List, Mapping

from catfish.models import Decision, RoundState


class RevealEntryKind(str, Enum):
    INTRO = 'intro'
    PROFILE = 'profile'
    SABOTAGE = 'sabotage'
    CONVERSATION = 'conversation'
    DECISION = 'decision'
    SCORE = 'score'
    VOTING = 'voting'


def score_round(rnd: RoundState, agree_points: int, sabotage_points: int) -> Dict[str, int]:
    """Compute this round's points per player.

    +agree_points to each creator whose target agreed; +sabotage_points to the
    author of every sabotage on a profile whose target rejected. Participants
    who earned nothing are present with 0.
    """
    scores: Dict[str, int] = {pid: 0 for pid in rnd.participants}
    for creator_id, target_id in rnd.assignments.items():
        if rnd.decisions.get(target_id) == Decision.AGREE:
            scores[creator_id] = scores.get(creator_id, 0) + agree_points
    for creator_id, actions in rnd.sabotage_log.items():
        target_id = rnd.assignments.get(creator_id)
        if target_id is None or rnd.decisions.get(target_id) != Decision.REJECT:
            continue
        for action in actions:
            scores[action.sabotager_id] = scores.get(action.sabotager_id, 0) + sabotage_points
    return scores


def tally_votes(votes: Mapping[str, str], vote_points: int) -> Dict[str, int]:
    """Points per voted-for player: vote_points for every vote received."""
    return {pid: count * vote_points for pid, count in Counter(votes.values()).items()}


def compile_reveal(rnd: RoundState, creator_order: Iterable[str], round_scores: Mapping[str, int], players) -> List[dict]:
    """Assemble the ordered reveal narrative for one round.

    For each creator: intro, profile, sabotages in commit order, the
    creator/target conversation (each unordered pair once, skipped when
    empty), decision, score. A single voting entry closes the sequence.
    """
    entries: List[dict] = []
    revealed_pairs = set()
    for creator_id in creator_order:
        target_id = rnd.assignments.get(creator_id)
        if target_id is None:
            continue
        creator_name = rnd.names.get(creator_id, '')
        target_name = rnd.names.get(target_id, '')
        profile = rnd.profiles.get(creator_id)

        entries.append({
            'type': RevealEntryKind.INTRO.value,
            'creator_id': creator_id,
            'creator_name': creator_name,
            'target_id': target_id,
            'target_name': target_name,
        })
        entries.append({
            'type': RevealEntryKind.PROFILE.value,
            'creator_id': creator_id,
            'profile': profile.to_dict() if profile else None,
        })
        for action in rnd.sabotage_log.get(creator_id, []):
            entries.append({'type': RevealEntryKind.SABOTAGE.value, 'sabotage': action.to_dict()})

        pair = frozenset((creator_id, target_id))
        if pair not in revealed_pairs:
            revealed_pairs.add(pair)
            messages = rnd.conversation(creator_id, target_id)
            if messages:
                entries.append({
                    'type': RevealEntryKind.CONVERSATION.value,
                    'creator_id': creator_id,
                    'target_id': target_id,
                    'messages': [m.to_dict() for m in messages],
                })

        decision = rnd.decisions.get(target_id)
        entries.append({
            'type': RevealEntryKind.DECISION.value,
            'target_id': target_id,
            'target_name': target_name,
            'decision': decision.value if decision else None,
        })
        entries.append({
            'type': RevealEntryKind.SCORE.value,
            'creator_id': creator_id,
            'creator_name': creator_name,
            'score': round_scores.get(creator_id, 0),
        })
    entries.append({'type': RevealEntryKind.VOTING.value, 'players': list(players)})
    return entries
