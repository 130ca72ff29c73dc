# tests/test_loaders.py
from pathlib import Path

import pandas as pd
import pytest

from route_planner.graph.loaders import (
    Location,
    LocationTable,
    build_graph,
    clean_code,
    load_network,
    read_distances,
    read_locations,
)
from route_planner.graph.model import EdgeData

DATA_DIR = Path(__file__).resolve().parents[1] / "data"


def write(tmp_path, name, text):
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return p


def test_read_locations(tmp_path):
    p = write(tmp_path, "Locations.csv",
              "Location,Id,Code,Parking\n"
              "Centro,1,CE,0\n"
              "Estacion,2, ES ,1 \n")
    table = read_locations(p)
    assert len(table) == 2
    assert table.code_by_id(2) == "ES"
    assert table.id_by_code("CE") == 1
    assert table.get("ES") == Location(2, "Estacion", "ES", True)
    assert table.parking_codes() == ["ES"]
    assert table.code_by_id(99) is None
    assert table.id_by_code("ZZ") is None


def test_read_locations_rejects_bad_id(tmp_path):
    p = write(tmp_path, "Locations.csv", "Location,Id,Code,Parking\nCentro,uno,CE,0\n")
    with pytest.raises(ValueError):
        read_locations(p)


def test_location_table_rejects_duplicates():
    with pytest.raises(ValueError):
        LocationTable([Location(1, "a", "A", False), Location(1, "b", "B", False)])
    with pytest.raises(ValueError):
        LocationTable([Location(1, "a", "A", False), Location(2, "b", "A", False)])


def test_parking_codes_follow_table_order():
    table = LocationTable([
        Location(3, "c", "C", True),
        Location(1, "a", "A", False),
        Location(2, "b", "B", True),
    ])
    assert table.parking_codes() == ["C", "B"]


def test_read_distances_marks_unavailable(tmp_path):
    p = write(tmp_path, "Distances.csv",
              "Location1,Location2,Driving,Walking\n"
              "A,B,5,10\n"
              "B,C,X,7\n"
              "A,C,20,x\n")
    df = read_distances(p)
    assert list(df.columns) == ["source", "target", "driving", "walking"]
    assert df.loc[0, "driving"] == 5
    assert pd.isna(df.loc[1, "driving"])
    assert pd.isna(df.loc[2, "walking"])


def test_read_distances_rejects_negative_and_garbage(tmp_path):
    p = write(tmp_path, "Distances.csv", "Location1,Location2,Driving,Walking\nA,B,-1,3\n")
    with pytest.raises(ValueError):
        read_distances(p)
    p = write(tmp_path, "Distances.csv", "Location1,Location2,Driving,Walking\nA,B,abc,3\n")
    with pytest.raises(ValueError):
        read_distances(p)


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_locations(tmp_path / "nope.csv")


def test_missing_columns_raise(tmp_path):
    p = write(tmp_path, "Distances.csv", "Location1,Location2\nA,B\n")
    with pytest.raises(ValueError):
        read_distances(p)


def test_build_graph_uses_none_for_unavailable(tmp_path):
    p = write(tmp_path, "Distances.csv",
              "Location1,Location2,Driving,Walking\n"
              "A,B,5,10\n"
              "B,C,X,7\n")
    table = LocationTable([Location(1, "a", "A", False), Location(2, "b", "B", False),
                           Location(3, "c", "C", True), Location(4, "d", "D", False)])
    g = build_graph(read_distances(p), table)
    assert ("B", EdgeData(5, 10)) in g.neighbors("A")
    assert ("C", EdgeData(None, 7)) in g.neighbors("B")
    assert ("B", EdgeData(None, 7)) in g.neighbors("C")
    # D está en la tabla pero no tiene segmentos
    assert g.has_node("D")
    assert isinstance(g.neighbors("A")[0][1].driving, int)


def test_clean_code():
    assert clean_code(" A B ") == "AB"


def test_load_sample_network():
    g, locations = load_network(DATA_DIR / "Locations.csv", DATA_DIR / "Distances.csv")
    assert len(locations) == 8
    assert all(loc.code in g for loc in locations)
    assert g.edge_count() == 13
    assert locations.parking_codes() == ["NS", "HO", "PK"]
