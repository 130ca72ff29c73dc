# tests/test_eco_route.py
from route_planner.graph.model import Graph
from route_planner.graph.algorithms import (
    ECO_ROUTE_FOUND_MESSAGE,
    NO_PARKING_MESSAGE,
    NO_VIABLE_ROUTE_MESSAGE,
    driving_time,
    eco_route,
    segment,
    walking_time,
)


def city():
    # S --coche--> P1 / P2 --a pie--> D
    g = Graph()
    g.add_edge("S", "P1", 4, 30)
    g.add_edge("S", "P2", 10, 40)
    g.add_edge("P1", "D", None, 12)
    g.add_edge("P2", "D", 2, 3)
    return g


def test_eco_route_picks_minimal_total():
    g = city()
    eco = eco_route(g, "S", "D", 20, ["P1", "P2"])
    # P1: 4 + 12 = 16 ; P2: 10 + 3 = 13
    assert eco.found
    assert eco.park == "P2"
    assert eco.drive_path == ["S", "P2"]
    assert eco.walk_path == ["P2", "D"]
    assert eco.message == ECO_ROUTE_FOUND_MESSAGE


def test_eco_route_walk_within_ceiling():
    g = city()
    eco = eco_route(g, "S", "D", 10, ["P1", "P2"])
    assert walking_time(g, eco.walk_path) <= 10
    assert eco.park == "P2"


def test_eco_route_no_parking_nodes():
    g = city()
    eco = eco_route(g, "S", "D", 20, [])
    assert eco.drive_path == [] and eco.walk_path == []
    assert eco.park is None
    assert eco.message == NO_PARKING_MESSAGE
    assert not eco.found


def test_eco_route_walk_exceeds_ceiling():
    g = Graph()
    g.add_edge("S", "P", 5, 50)
    g.add_edge("P", "D", 5, 30)
    eco = eco_route(g, "S", "D", 10, ["P"])
    assert eco.drive_path == [] and eco.walk_path == []
    assert eco.message == NO_VIABLE_ROUTE_MESSAGE


def test_eco_route_tie_prefers_longer_walk():
    g = Graph()
    g.add_edge("S", "P1", 10, None)
    g.add_edge("P1", "D", None, 5)
    g.add_edge("S", "P2", 5, None)
    g.add_edge("P2", "D", None, 10)
    # ambos suman 15; P2 camina más
    eco = eco_route(g, "S", "D", 20, ["P1", "P2"])
    assert eco.park == "P2"


def test_eco_route_full_tie_keeps_table_order():
    g = Graph()
    g.add_edge("S", "P1", 5, None)
    g.add_edge("P1", "D", None, 5)
    g.add_edge("S", "P2", 5, None)
    g.add_edge("P2", "D", None, 5)
    assert eco_route(g, "S", "D", 20, ["P1", "P2"]).park == "P1"
    assert eco_route(g, "S", "D", 20, ["P2", "P1"]).park == "P2"


def test_eco_route_skips_forbidden_parking():
    g = city()
    eco = eco_route(g, "S", "D", 20, ["P1", "P2"], avoid_nodes={"P2"})
    assert eco.park == "P1"
    assert "P2" not in eco.drive_path + eco.walk_path


def test_eco_route_respects_forbidden_segments_on_both_legs():
    g = city()
    eco = eco_route(g, "S", "D", 20, ["P1", "P2"], avoid_segments={("D", "P2")})
    # P2 ya no puede llegar a pie a D sin pasar por el segmento prohibido
    assert eco.park == "P1"
    assert eco.walk_path == ["P1", "D"]


def test_eco_route_all_parking_forbidden_is_not_viable():
    g = city()
    eco = eco_route(g, "S", "D", 20, ["P1", "P2"], avoid_nodes={"P1", "P2"})
    assert eco.message == NO_VIABLE_ROUTE_MESSAGE


def test_eco_route_walk_leg_uses_walking_cost():
    g = Graph()
    g.add_edge("S", "P", 1, None)
    # en coche el camino corto sería P-X-D, a pie es P-D
    g.add_edge("P", "X", 1, 50)
    g.add_edge("X", "D", 1, 50)
    g.add_edge("P", "D", 100, 8)
    eco = eco_route(g, "S", "D", 10, ["P"])
    assert eco.walk_path == ["P", "D"]
    assert walking_time(g, eco.walk_path) == 8


def test_eco_route_parking_at_source():
    g = city()
    eco = eco_route(g, "P1", "D", 20, ["P1"])
    assert eco.drive_path == ["P1"]
    assert eco.walk_path == ["P1", "D"]
    assert driving_time(g, eco.drive_path) == 0


def test_eco_route_without_ceiling():
    g = Graph()
    g.add_edge("S", "P", 5, 50)
    g.add_edge("P", "D", 5, 30)
    eco = eco_route(g, "S", "D", None, ["P"])
    assert eco.park == "P"


def test_eco_route_minimal_among_candidates():
    g = Graph()
    g.add_edge("S", "A", 3, None)
    g.add_edge("A", "B", 3, None)
    g.add_edge("B", "C", 3, None)
    g.add_edge("A", "D", None, 9)
    g.add_edge("B", "D", None, 4)
    g.add_edge("C", "D", None, 1)
    parking = ["A", "B", "C"]
    eco = eco_route(g, "S", "D", 5, parking)
    chosen = driving_time(g, eco.drive_path) + walking_time(g, eco.walk_path)
    # A se descarta por el tope; B = 6 + 4 = 10 ; C = 9 + 1 = 10 -> B camina más
    assert chosen == 10
    assert eco.park == "B"
    assert segment("A", "D") not in {segment(a, b) for a, b in zip(eco.walk_path, eco.walk_path[1:])}
