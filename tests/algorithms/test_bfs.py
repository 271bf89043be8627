from railflow.algorithms.bfs import (
    SearchState,
    augmenting_path,
    end_of_line_stations,
    reachable_nodes,
)
from railflow.algorithms.paths import links_bottleneck, path_bottleneck, path_links
from tests.algorithms.sample_graphs import build_pair


class TestAugmentingPath:
    def test_finds_path_and_predecessors(self, square1):
        net = square1.residual
        state = augmenting_path(net, ["A"], "D")
        assert state is not None

        path = path_links(net, state, "D")
        names = [net.endpoints(link) for link in path]
        assert names == [("A", "B"), ("B", "D")]
        assert path_bottleneck(net, state, "D") == 2

    def test_first_found_stops_early(self, square1):
        net = square1.residual
        state = augmenting_path(net, ["A"], "D")
        # C is discovered from A but never expanded once D is reached via B
        c = net.find_node("C").index
        assert state.visited[c] is True
        assert state.pred[c] is not None

    def test_skips_zero_capacity_and_inactive(self, square1):
        net = square1.residual
        net.find_link("B", "D").capacity = 0
        state = augmenting_path(net, ["A"], "D")
        path = path_links(net, state, "D")
        assert [net.endpoints(l) for l in path] == [("A", "C"), ("C", "D")]

        square1.set_active([square1.regular.find_link("A", "C").index], False)
        assert augmenting_path(net, ["A"], "D") is None

    def test_multi_source(self, lines1):
        net = lines1.residual
        state = augmenting_path(net, ["a", "d", "e"], "c")
        path = path_links(net, state, "c")
        assert len(path) == 1
        assert net.endpoints(path[0])[1] == "c"

    def test_unknown_names(self, square1):
        net = square1.residual
        assert augmenting_path(net, ["A"], "Z") is None
        assert augmenting_path(net, ["Z"], "D") is None
        assert augmenting_path(net, ["Z", "A"], "D") is not None

    def test_target_in_sources_is_never_reached(self, square1):
        assert augmenting_path(square1.residual, ["A", "D"], "D") is None

    def test_state_is_fresh_per_search(self, square1):
        net = square1.residual
        first = augmenting_path(net, ["A"], "D")
        second = augmenting_path(net, ["A"], "D")
        assert first is not second
        assert first.pred == second.pred


def test_search_state_for_network(square1):
    state = SearchState.for_network(square1.regular, cost=7)
    assert state.visited == [False] * 4
    assert state.cost == [7] * 4
    assert state.pred == [None] * 4


def test_links_bottleneck_empty():
    assert links_bottleneck([]) == 0


def test_reachable_nodes(lines1):
    net = lines1.regular
    names = {net.node(i).name for i in reachable_nodes(net, "a")}
    assert names == set("abcde")
    assert {net.node(i).name for i in reachable_nodes(net, "h")} == {"h"}
    assert reachable_nodes(net, "Z") == set()


def test_reachable_nodes_long_line():
    """A line far deeper than the recursion limit is walked without error."""
    names = [f"n{i}" for i in range(5000)]
    pair = build_pair(names, [(a, b, 1) for a, b in zip(names, names[1:])])
    assert len(reachable_nodes(pair.regular, "n0")) == 5000


def test_end_of_line_stations(lines1):
    net = lines1.regular
    assert end_of_line_stations(net, "c") == ["d", "e", "a"]
    assert end_of_line_stations(net, "a") == ["a", "d", "e"]
    assert end_of_line_stations(net, "f") == ["f", "g"]
    assert end_of_line_stations(net, "h") == []
    assert end_of_line_stations(net, "Z") == []
