import pytest

from railflow.repository import Station, StationRepository
from railflow.types.base import GroupKind


@pytest.fixture
def repo():
    repo = StationRepository()
    for station in (
        Station("Lisboa Oriente", "Lisboa", "Lisboa", "Parque das Nacoes"),
        Station("Entroncamento", "Santarem", "Entroncamento", "Entroncamento"),
        Station("Tomar", "Santarem", "Tomar", ""),
        Station("Pampilhosa", "Aveiro", "Mealhada", ""),
    ):
        repo.add_station(station)
    return repo


def test_add_and_find(repo):
    assert len(repo) == 4
    assert "Tomar" in repo
    assert repo.find_station("Tomar").municipality == "Tomar"
    assert repo.find_station("Faro") is None


def test_duplicate_name_keeps_first(repo):
    assert repo.add_station(Station("Tomar", district="Lisboa")) is False
    assert repo.find_station("Tomar").district == "Santarem"
    assert repo.districts["Santarem"] == ["Entroncamento", "Tomar"]
    assert "Tomar" not in repo.districts["Lisboa"]


def test_groupings_preserve_insertion_order(repo):
    assert list(repo.districts) == ["Lisboa", "Santarem", "Aveiro"]
    assert repo.municipalities["Mealhada"] == ["Pampilhosa"]
    assert repo.townships[""] == ["Tomar", "Pampilhosa"]


def test_grouping_by_name(repo):
    assert repo.grouping("District") == repo.grouping(GroupKind.DISTRICT)
    with pytest.raises(ValueError, match="Invalid grouping 'county'"):
        repo.grouping("county")


def test_grouping_returns_copy(repo):
    repo.districts["Santarem"].append("Faro")
    repo.districts.pop("Lisboa")
    assert repo.districts["Santarem"] == ["Entroncamento", "Tomar"]
    assert "Lisboa" in repo.districts


def test_validity_checks(repo):
    assert repo.is_valid_district("Aveiro")
    assert not repo.is_valid_district("Faro")
    assert repo.is_valid_municipality("Entroncamento")
    assert repo.is_valid_township("Parque das Nacoes")
    assert repo.is_valid_township("")
    assert not repo.is_valid_township("Eiras")


def test_station_group():
    station = Station("X", district="D", municipality="M", township="T")
    assert [station.group(kind) for kind in GroupKind] == ["D", "M", "T"]
