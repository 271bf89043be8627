import pytest

from railflow.algorithms.max_flow import augment_path, calc_max_flow
from railflow.types.dto import FlowSummary
from tests.algorithms.sample_graphs import build_pair


def assert_conserved(pair, sources, target):
    """Net flow is zero at every node other than the sources and target."""
    net = pair.regular
    for node in net.nodes:
        if node.name in sources or node.name == target:
            continue
        out_flow = sum(link.flow for link in net.out_links(node.index))
        in_flow = sum(link.flow for link in net.in_links(node.index))
        assert out_flow == in_flow, node.name


def assert_within_capacity(pair):
    for link in pair.regular.links:
        assert 0 <= link.flow <= link.capacity
    for link in pair.residual.links:
        assert link.capacity >= 0


class TestMaxFlow:
    def test_square(self, square1):
        assert calc_max_flow(square1, "A", "D") == 5
        assert_conserved(square1, {"A"}, "D")
        assert_within_capacity(square1)

    def test_single_source_as_list(self, square1):
        assert calc_max_flow(square1, ["A"], "D") == 5

    def test_reverse_direction(self, square1):
        assert calc_max_flow(square1, "D", "A") == 5

    def test_multi_source(self, lines1):
        assert calc_max_flow(lines1, ["a", "d", "e"], "c") == 3 + 2 + 4
        assert_conserved(lines1, {"a", "d", "e"}, "c")

    def test_flow_cancellation(self, cancel1):
        assert calc_max_flow(cancel1, "s", "t") == 3
        net = cancel1.regular
        assert net.find_link("a", "b").flow == 0
        assert net.find_link("b", "a").flow == 1
        assert_conserved(cancel1, {"s"}, "t")
        assert_within_capacity(cancel1)

    def test_disconnected_is_zero(self, lines1):
        assert calc_max_flow(lines1, "a", "f") == 0
        assert calc_max_flow(lines1, "a", "h") == 0

    def test_source_equals_target_is_zero(self, square1):
        assert calc_max_flow(square1, "A", "A") == 0

    def test_unknown_names_are_zero(self, square1):
        assert calc_max_flow(square1, "A", "Z") == 0
        assert calc_max_flow(square1, "Z", "A") == 0

    def test_repeated_calls_start_from_zero(self, square1):
        first = calc_max_flow(square1, "A", "D")
        calc_max_flow(square1, "B", "C")
        assert calc_max_flow(square1, "A", "D") == first

    def test_zero_capacity_rail(self):
        pair = build_pair("AB", [("A", "B", 0)])
        assert calc_max_flow(pair, "A", "B") == 0

    def test_parallel_rails_add_up(self):
        pair = build_pair("AB", [("A", "B", 2), ("A", "B", 3), ("B", "A", 4)])
        assert calc_max_flow(pair, "A", "B") == 9

    def test_inactive_links_carry_no_flow(self, square1):
        square1.set_active([square1.regular.find_link("A", "B").index], False)
        assert calc_max_flow(square1, "A", "D") == 3
        assert square1.regular.find_link("A", "B").flow == 0
        assert square1.regular.find_link("B", "A").flow == 0


class TestFlowSummary:
    def test_min_cut_matches_flow(self, square1):
        value, summary = calc_max_flow(square1, "A", "D", return_summary=True)
        assert isinstance(summary, FlowSummary)
        assert summary.total_flow == value == 5

        net = square1.regular
        assert summary.reachable == frozenset({"A", "B"})
        cut = {net.endpoints(net.link(i)) for i in summary.min_cut}
        assert cut == {("A", "C"), ("B", "D")}
        assert sum(net.link(i).capacity for i in summary.min_cut) == value

    def test_link_flow_snapshot(self, square1):
        _, summary = calc_max_flow(square1, "A", "D", return_summary=True)
        net = square1.regular
        assert summary.link_flow == {link.index: link.flow for link in net.links}
        assert summary.link_flow[net.find_link("B", "D").index] == 2

    @pytest.mark.parametrize(
        "fixture_name,sources,target",
        [
            ("square1", ["A"], "D"),
            ("cancel1", ["s"], "t"),
            ("lines1", ["a", "d", "e"], "c"),
        ],
    )
    def test_duality(self, request, fixture_name, sources, target):
        pair = request.getfixturevalue(fixture_name)
        value, summary = calc_max_flow(pair, sources, target, return_summary=True)
        net = pair.regular
        assert all(name in summary.reachable for name in sources)
        assert target not in summary.reachable
        assert sum(net.link(i).capacity for i in summary.min_cut) == value

    def test_zero_flow_summary(self, lines1):
        value, summary = calc_max_flow(lines1, "a", "f", return_summary=True)
        assert value == 0
        assert summary.min_cut == ()
        assert summary.reachable == frozenset("abcde")


def test_augment_path_clamps_and_cancels():
    pair = build_pair("AB", [("A", "B", 3)])
    net = pair.regular
    ab = net.find_link("A", "B")
    ba = net.find_link("B", "A")
    ab.flow = 2
    pair.sync_residual(ab)

    # residual B->A offers 3 unused + 2 cancellable
    residual_ba = pair.residual.link(ba.corresponding)
    assert residual_ba.capacity == 5
    augment_path(pair, [residual_ba], 4)

    assert ba.flow == 3
    assert ab.flow == 1
    assert residual_ba.capacity == 3 - 3 + 1
    assert pair.residual.link(ab.corresponding).capacity == 3 - 1 + 3


def test_augment_path_detects_broken_pairing():
    pair = build_pair("AB", [("A", "B", 1)])
    residual_ab = pair.residual.link(pair.regular.find_link("A", "B").corresponding)
    with pytest.raises(RuntimeError, match="residual pairing"):
        augment_path(pair, [residual_ab], 3)
