import logging

import pytest

from railflow.io import (
    RailRecord,
    build_network,
    load_network_csv,
    load_network_files,
    load_scenario_file,
    load_scenario_yaml,
    load_stations_csv,
)
from railflow.repository import Station
from railflow.types.base import Service


class TestStationsCsv:
    def test_rows_and_quoted_names(self, data_dir):
        stations = load_stations_csv(data_dir / "stations.csv")
        assert len(stations) == 7
        assert stations[0] == Station(
            name="Lisboa Oriente",
            district="Lisboa",
            municipality="Lisboa",
            township="Parque das Nacoes",
            line="Linha do Norte",
        )
        assert stations[5].name == "Pampilhosa, Estacao"

    def test_blank_cells_become_empty_strings(self, data_dir):
        tomar = load_stations_csv(data_dir / "stations.csv")[4]
        assert tomar.name == "Tomar"
        assert tomar.township == ""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_stations_csv(tmp_path / "nope.csv")

    def test_missing_column(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text("Name,District\nA,X\n")
        with pytest.raises(ValueError, match="missing columns"):
            load_stations_csv(path)

    def test_empty_name(self, tmp_path):
        path = tmp_path / "stations.csv"
        path.write_text("Name,District,Municipality,Township,Line\n,X,Y,Z,L\n")
        with pytest.raises(ValueError, match="row 2"):
            load_stations_csv(path)


class TestNetworkCsv:
    def test_rows(self, data_dir):
        rails = load_network_csv(data_dir / "network.csv")
        assert len(rails) == 5
        assert rails[0] == RailRecord("Lisboa Oriente", "Entroncamento", 8, Service.STANDARD)
        assert rails[1].service is Service.PREMIUM
        assert rails[4].target == "Pampilhosa, Estacao"

    def test_bad_capacity(self, tmp_path):
        path = tmp_path / "network.csv"
        path.write_text("Station_A,Station_B,Capacity,Service\nA,B,lots,STANDARD\n")
        with pytest.raises(ValueError, match="row 2: invalid capacity"):
            load_network_csv(path)

    def test_unknown_service(self, tmp_path):
        path = tmp_path / "network.csv"
        path.write_text(
            "Station_A,Station_B,Capacity,Service\nA,B,1,STANDARD\nA,B,1,MAGLEV\n"
        )
        with pytest.raises(ValueError, match="row 3: Invalid service 'MAGLEV'"):
            load_network_csv(path)


def test_build_network_skips_duplicates_and_unknown_endpoints(caplog):
    stations = [Station("A"), Station("B"), Station("A", district="dup")]
    rails = [RailRecord("A", "B", 3), RailRecord("A", "Z", 9)]
    with caplog.at_level(logging.WARNING, logger="railflow"):
        network = build_network(stations, rails)
    assert network.stations == ["A", "B"]
    assert network.rails == [("A", "B")]
    assert network.repository.find_station("A").district == ""
    assert "unknown station(s) ['Z']" in caplog.text


def test_load_network_files(data_dir):
    network = load_network_files(data_dir / "stations.csv", data_dir / "network.csv")
    assert len(network.stations) == 6
    assert network.max_flow("Lisboa Oriente", "Porto Campanha") == 4
    result = network.min_cost_max_flow("Lisboa Oriente", "Porto Campanha")
    assert (result.flow, result.cost) == (4, 4 * (2 + 4 + 2))


class TestScenarioYaml:
    def test_inline_scenario(self):
        network = load_scenario_yaml(
            """
stations:
  - A
  - {name: B, district: North}
  - name: C
    district: North
rails:
  - {source: A, target: B, capacity: 5}
  - {source: B, target: C, capacity: 3, service: ALFA PENDULAR}
"""
        )
        assert network.stations == ["A", "B", "C"]
        assert network.repository.districts == {"": ["A"], "North": ["B", "C"]}
        assert network.max_flow("A", "C") == 3
        assert network.min_cost_max_flow("A", "C").cost == 3 * 2 + 3 * 4

    def test_empty_document(self):
        assert load_scenario_yaml("").stations == []

    def test_datasets_relative_to_base_dir(self, data_dir):
        network = load_scenario_file(data_dir / "scenario.yaml")
        assert len(network.stations) == 8
        assert network.max_flow("Lisboa Oriente", "Ovar") == 2
        result = network.min_cost_max_flow("Lisboa Oriente", "Ovar")
        assert result.cost == 2 * (2 + 4 + 2 + 2 + 6)
        assert network.repository.districts["Aveiro"] == ["Pampilhosa, Estacao", "Ovar"]

    def test_missing_scenario_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_scenario_file(tmp_path / "missing.yaml")

    @pytest.mark.parametrize(
        "text,message",
        [
            ("- a\n- b\n", "dictionary at top-level"),
            ("network: {}\n", "Unrecognized top-level key"),
            ("stations: A\n", "'stations' must be a list"),
            ("stations: [{district: X}]\n", "mapping with a 'name' key"),
            ("stations: [{name: A, colour: red}]\n", "Unrecognized station key"),
            ("rails: {}\n", "'rails' must be a list"),
            ("rails: [A]\n", "must be a mapping"),
            ("rails: [{source: A, target: B}]\n", "'capacity'"),
            (
                "rails: [{source: A, target: B, capacity: 1, speed: 3}]\n",
                "Unrecognized rail key",
            ),
            ("rails: [{source: A, target: B, capacity: -1}]\n", "non-negative"),
            ("datasets: [a.csv]\n", "'datasets' must be a mapping"),
            ("datasets: {stops: a.csv}\n", "Unrecognized dataset key"),
        ],
    )
    def test_shape_errors(self, text, message):
        with pytest.raises(ValueError, match=message):
            load_scenario_yaml(text)
