from railflow.analysis.pairs import all_pairs_max_flow
from railflow.graph.pair import NetworkPair
from railflow.types.dto import NetworkMaxFlow
from tests.algorithms.sample_graphs import build_pair


def test_square_best_pair(square1):
    # A-B: 5 direct + 2 via C-D-B
    assert all_pairs_max_flow(square1) == NetworkMaxFlow(pairs=(("A", "B"),), value=7)


def test_skips_other_components(lines1):
    result = all_pairs_max_flow(lines1)
    assert result.pairs == (("f", "g"),)
    assert result.value == 7


def test_ties_are_all_reported():
    pair = build_pair("ABCD", [("A", "B", 4), ("C", "D", 4), ("B", "C", 1)])
    result = all_pairs_max_flow(pair)
    assert result.value == 4
    assert result.pairs == (("A", "B"), ("C", "D"))


def test_empty_network():
    assert all_pairs_max_flow(NetworkPair()) == NetworkMaxFlow(pairs=(), value=0)


def test_no_rails():
    assert all_pairs_max_flow(build_pair("AB", [])) == NetworkMaxFlow()
