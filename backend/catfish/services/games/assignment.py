import random
from typing import Dict, Optional, Sequence


def build_derangement(player_ids: Sequence[str], rng: Optional[random.Random] = None) -> Dict[str, str]:
    """Assign every player a distinct target other than themselves.

    Shuffles the players and points each one at the next in the shuffled
    order (Sattolo's cycle), so the mapping is a permutation with no fixed
    points. Fewer than two players yield an empty mapping.
    """
    ids = list(player_ids)
    if len(ids) < 2:
        return {}
    (rng or random).shuffle(ids)
    return {creator: ids[(i + 1) % len(ids)] for i, creator in enumerate(ids)}
