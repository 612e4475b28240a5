import random

import pytest

from catfish.models import CatfishProfile, Decision, Message, RoundState, SabotageAction
from catfish.services.games.assignment import build_derangement
from catfish.services.games.scoring import compile_reveal, score_round, tally_votes


@pytest.mark.parametrize('size', range(2, 9))
def test_derangement_has_no_fixed_points(size):
    ids = [f'p{i}' for i in range(size)]
    for seed in range(25):
        mapping = build_derangement(ids, random.Random(seed))
        assert set(mapping) == set(ids)
        assert sorted(mapping.values()) == sorted(ids)
        assert all(creator != target for creator, target in mapping.items())


def test_derangement_needs_two_players():
    assert build_derangement([]) == {}
    assert build_derangement(['solo']) == {}


def _round():
    rnd = RoundState(number=1)
    rnd.assignments = {'a': 'b', 'b': 'c', 'c': 'a'}
    rnd.names = {'a': 'Ann', 'b': 'Ben', 'c': 'Cat'}
    for pid in rnd.assignments:
        rnd.profiles[pid] = CatfishProfile(pid, f'fake {pid}', 'bio', ['1', '2', '3'], ['4', '5', '6'], '')
    return rnd


def _sabotage(rnd, sabotager, creator, new_value):
    action = SabotageAction(sabotager, rnd.names[sabotager], creator, 'bio', 'bio', new_value)
    rnd.sabotage_log.setdefault(creator, []).append(action)


def test_score_round_agree_and_sabotage_bonus():
    rnd = _round()
    rnd.decisions = {'b': Decision.AGREE, 'c': Decision.REJECT}
    # b's profile targets c, who rejected: both sabotages on it pay out
    _sabotage(rnd, 'a', 'b', 'x')
    _sabotage(rnd, 'c', 'b', 'y')
    # a's profile targets b, who agreed: no sabotage bonus
    _sabotage(rnd, 'c', 'a', 'z')
    scores = score_round(rnd, agree_points=1000, sabotage_points=250)
    assert scores == {'a': 1000 + 250, 'b': 0, 'c': 250}


def test_score_round_without_decisions_is_zero():
    rnd = _round()
    _sabotage(rnd, 'a', 'b', 'x')
    assert score_round(rnd, 1000, 250) == {'a': 0, 'b': 0, 'c': 0}


def test_tally_votes():
    assert tally_votes({'a': 'b', 'c': 'b', 'b': 'a'}, 200) == {'b': 400, 'a': 200}
    assert tally_votes({}, 200) == {}


def test_compile_reveal_reveals_each_pair_once():
    rnd = RoundState(number=2)
    rnd.assignments = {'a': 'b', 'b': 'a'}
    rnd.names = {'a': 'Ann', 'b': 'Ben'}
    rnd.messages = [Message('b', 'a', 'hi'), Message('a', 'b', 'hello'), Message('b', 'a', 'bye')]
    entries = compile_reveal(rnd, ['a', 'b'], {'a': 0, 'b': 0}, [])
    convos = [e for e in entries if e['type'] == 'conversation']
    assert len(convos) == 1
    assert [m['text'] for m in convos[0]['messages']] == ['hi', 'hello', 'bye']
    # Missing profiles are revealed as None rather than failing
    assert all(e['profile'] is None for e in entries if e['type'] == 'profile')


def test_compile_reveal_keeps_disconnected_names():
    rnd = _round()
    rnd.decisions = {'b': Decision.AGREE}
    entries = compile_reveal(rnd, ['a', 'c'], {'a': 1000}, [{'id': 'a'}, {'id': 'c'}])
    intros = [e for e in entries if e['type'] == 'intro']
    assert [(e['creator_name'], e['target_name']) for e in intros] == [('Ann', 'Ben'), ('Cat', 'Ann')]
    decisions = [e['decision'] for e in entries if e['type'] == 'decision']
    assert decisions == ['agree', None]
    assert entries[-1] == {'type': 'voting', 'players': [{'id': 'a'}, {'id': 'c'}]}
