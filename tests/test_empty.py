from __future__ import annotations

from rae.assignment import EmptyAssignmentAlgorithm
from rae.contracts import ReinforcementEdge
from rae.roster import roster_to_dicts
from tests.helpers import make_character


def test_empty_clears_edges_and_normalizes_marches():
    source = make_character("S", "online", marches_count=6)
    source.reinforce = [ReinforcementEdge("X"), ReinforcementEdge("Y")]
    result = EmptyAssignmentAlgorithm().solve([
        source,
        make_character("Z", "offline_empty", marches_count=0),
        make_character("W", "offline_empty", marches_count=11),
    ])
    assert [c.reinforce for c in result] == [[], [], []]
    assert [c.marches_count for c in result] == [6, 6, 6]
    assert len(source.reinforce) == 2


def test_empty_is_idempotent():
    algo = EmptyAssignmentAlgorithm()
    roster = [make_character("S", "online", marches_count=-1), make_character("U", "unknown")]
    roster[0].reinforce = [ReinforcementEdge("U")]
    once = algo.solve(roster)
    twice = algo.solve(once)
    assert roster_to_dicts(once) == roster_to_dicts(twice)
    assert once[0].marches_count == 1
    assert once[1].status == "unknown"
