import pytest

from railflow.algorithms.max_flow import calc_max_flow
from railflow.analysis.failure import FailureAnalyzer
from railflow.types.dto import FailureImpact


@pytest.fixture
def analyzer(lines1):
    return FailureAnalyzer(lines1)


def _rail(pair, a, b):
    return pair.regular.find_link(a, b).index


def test_deactivate_and_activate_are_lockstep(lines1, analyzer):
    ce = _rail(lines1, "c", "e")
    analyzer.deactivate_links([ce])
    link = lines1.regular.link(ce)
    reverse = lines1.regular.link(link.reverse)
    for l in (link, reverse):
        assert not l.active
        assert not lines1.residual.link(l.corresponding).active

    analyzer.activate_links([ce])
    assert all(l.active for l in lines1.regular.links)
    assert all(l.active for l in lines1.residual.links)


def test_activation_is_idempotent(square1):
    analyzer = FailureAnalyzer(square1)
    before = calc_max_flow(square1, "A", "D")
    links = [_rail(square1, "A", "B"), _rail(square1, "D", "C")]
    analyzer.deactivate_links(links)
    analyzer.deactivate_links(links)
    analyzer.activate_links(links)
    assert calc_max_flow(square1, "A", "D") == before


def test_links_deactivated_restores_on_error(lines1, analyzer):
    ce = _rail(lines1, "c", "e")
    with pytest.raises(KeyError):
        with analyzer.links_deactivated([ce]):
            assert not lines1.regular.link(ce).active
            raise KeyError("boom")
    assert lines1.regular.link(ce).active


def test_max_flow_under_failure(square1):
    analyzer = FailureAnalyzer(square1)
    impact = analyzer.max_flow_under_failure([_rail(square1, "A", "B")], "A", "D")
    assert impact == FailureImpact(baseline=5, degraded=3)
    assert impact.reduction_pct == pytest.approx(40.0)
    # links are active again afterwards
    assert calc_max_flow(square1, "A", "D") == 5


def test_failure_using_reverse_direction(square1):
    analyzer = FailureAnalyzer(square1)
    impact = analyzer.max_flow_under_failure([_rail(square1, "B", "A")], ["A"], "D")
    assert impact.degraded == 3


def test_no_failed_links(square1):
    analyzer = FailureAnalyzer(square1)
    impact = analyzer.max_flow_under_failure([], "A", "D")
    assert impact.baseline == impact.degraded == 5
    assert impact.reduction_pct == 0.0


def test_incoming_reduced_flow(lines1, analyzer):
    ce = _rail(lines1, "c", "e")
    assert analyzer.incoming_reduced_flow([ce], "c") == 3 + 2
    assert analyzer.incoming_reduced_flow([ce], "e") == 0
    assert lines1.regular.link(ce).active


def test_rank_stations_by_degradation(lines1, analyzer):
    ranking = analyzer.rank_stations_by_degradation([_rail(lines1, "c", "e")])
    assert [(r.station, r.baseline, r.degraded) for r in ranking] == [
        ("e", 4, 0),
        ("c", 9, 5),
        ("b", 8, 5),
        ("a", 3, 2),
        ("d", 2, 2),
        ("f", 7, 7),
        ("g", 7, 7),
        ("h", 0, 0),
    ]
    assert ranking[0].reduction_pct == pytest.approx(100.0)
    assert ranking[1].reduction_pct == pytest.approx(100 * (1 - 5 / 9))


def test_zero_baseline_ranks_as_zero_percent(lines1, analyzer):
    """A station no line end can reach has 0% reduction, not a division error."""
    ranking = analyzer.rank_stations_by_degradation([_rail(lines1, "f", "g")])
    by_station = {r.station: r for r in ranking}
    assert by_station["h"].baseline == 0
    assert by_station["h"].reduction_pct == 0.0
    assert by_station["f"].reduction_pct == pytest.approx(100.0)


class TestSelectRandomLinks:
    def test_distinct_rails(self, lines1, analyzer):
        links = analyzer.select_random_links(5, seed=7)
        assert len(links) == 5
        rails = {frozenset((i, lines1.regular.link(i).reverse)) for i in links}
        assert len(rails) == 5

    def test_reproducible_with_seed(self, analyzer):
        assert analyzer.select_random_links(3, seed=42) == analyzer.select_random_links(
            3, seed=42
        )

    def test_too_many(self, analyzer):
        with pytest.raises(ValueError, match="5 active rails"):
            analyzer.select_random_links(6, seed=1)

    def test_negative_count(self, analyzer):
        with pytest.raises(ValueError):
            analyzer.select_random_links(-1)

    def test_zero(self, analyzer):
        assert analyzer.select_random_links(0) == []

    def test_skips_inactive(self, lines1, analyzer):
        ce = _rail(lines1, "c", "e")
        analyzer.deactivate_links([ce])
        links = analyzer.select_random_links(4, seed=3)
        assert all(lines1.regular.link(i).active for i in links)
        with pytest.raises(ValueError):
            analyzer.select_random_links(5, seed=3)
