# src/route_planner/graph/algorithms.py
"""
Algoritmos de rutas sobre el grafo de conducción / a pie:
- weighted_search: Dijkstra genérico (selector de coste + predicado de paso)
- shortest_path, restricted_path, alternative_path
- eco_route (conducir hasta un parque, aparcar y caminar)
- Evaluadores de coste de un camino ya calculado

Ninguna función de este módulo lanza excepciones por "no hay ruta":
el camino vacío [] es la respuesta canónica y un coste inválido es None.
"""
import heapq
import logging
import math
from collections import namedtuple
from operator import attrgetter
from typing import Callable, Dict, FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple, Union

from .model import Graph, EdgeData, MODES

logger = logging.getLogger(__name__)

Segment = FrozenSet[str]
CostSelector = Union[str, Callable[[EdgeData], Optional[int]]]
EdgePredicate = Callable[[str, str], bool]

# coste de un camino que usa una arista inexistente o no disponible para el modo
INVALID_COST = None

NO_PARKING_MESSAGE = "No parking nodes available."
NO_VIABLE_ROUTE_MESSAGE = "No viable eco route found."
ECO_ROUTE_FOUND_MESSAGE = "Eco route found."


class EcoRoute(namedtuple("EcoRoute", ["drive_path", "park", "walk_path", "message"])):
    """Resultado de eco_route: tramo en coche, parque elegido, tramo a pie y mensaje."""
    __slots__ = ()

    @property
    def found(self) -> bool:
        return bool(self.drive_path) and bool(self.walk_path)


# -------------------------
# SEGMENTOS / RESTRICCIONES
# -------------------------
def segment(a: str, b: str) -> Segment:
    """Segmento no dirigido: segment(a, b) == segment(b, a)."""
    return frozenset((a, b))


def normalize_segments(pairs: Optional[Iterable]) -> Set[Segment]:
    """
    Convierte pares (a, b) o segmentos ya normalizados en un set de Segment.
    """
    out: Set[Segment] = set()
    for pair in pairs or ():
        items = tuple(pair)
        if len(items) == 1:
            # frozenset de un bucle (a, a)
            items = items * 2
        if len(items) != 2:
            raise ValueError(f"A segment needs exactly two nodes, got {pair!r}")
        out.add(segment(items[0], items[1]))
    return out


def avoiding(avoid_nodes: Optional[Iterable[str]] = None,
             avoid_segments: Optional[Iterable] = None) -> Optional[EdgePredicate]:
    """
    Construye el predicado (u, v) -> bool que prohíbe entrar en avoid_nodes
    y recorrer cualquier segmento de avoid_segments (en cualquier sentido).
    Devuelve None si no hay restricciones.
    """
    nodes = set(avoid_nodes or ())
    segments = normalize_segments(avoid_segments)
    if not nodes and not segments:
        return None

    def allowed(u: str, v: str) -> bool:
        return v not in nodes and segment(u, v) not in segments
    return allowed


def _cost_getter(cost: CostSelector) -> Callable[[EdgeData], Optional[int]]:
    if callable(cost):
        return cost
    if cost not in MODES:
        raise ValueError(f"Unknown cost mode {cost!r}; expected one of {MODES}")
    return attrgetter(cost)


# -------------------------
# DIJKSTRA GENÉRICO + UTIL
# -------------------------
def weighted_search(graph: Graph, source: str, cost: CostSelector = "driving",
                    allowed: Optional[EdgePredicate] = None) -> Tuple[Dict[str, float], Dict[str, str]]:
    """
    Dijkstra parametrizado.
    cost: "driving", "walking" o callable EdgeData -> Optional[int]; None = arista inutilizable.
    allowed: predicado opcional (u, v) -> bool sobre el paso dirigido u->v.
    retorna: (dist, prev) donde dist[node] = coste mínimo (inf si no se alcanza)
    y prev[node] = predecesor en el árbol de caminos mínimos.
    Empates en la cola se resuelven por el orden del heap.
    """
    edge_cost = _cost_getter(cost)
    dist: Dict[str, float] = {node: math.inf for node in graph.nodes}
    prev: Dict[str, str] = {}
    dist[source] = 0
    pq: List[Tuple[float, str]] = [(0, source)]
    settled = set()

    while pq:
        d, u = heapq.heappop(pq)
        if u in settled:
            continue
        settled.add(u)
        for v, data in graph.neighbors(u):
            w = edge_cost(data)
            if w is None or v in settled:
                continue
            if allowed is not None and not allowed(u, v):
                continue
            alt = d + w
            if alt < dist.get(v, math.inf):
                dist[v] = alt
                prev[v] = u
                heapq.heappush(pq, (alt, v))

    return dist, prev


def reconstruct_path(prev: Dict[str, str], source: str, target: str) -> List[str]:
    """
    Reconstruye el camino source -> target usando prev.
    Devuelve [] si target no es alcanzable; si source == target devuelve [source].
    """
    if source == target:
        return [source]
    if target not in prev:
        return []
    path: List[str] = []
    u: Optional[str] = target
    while u is not None:
        path.append(u)
        if u == source:
            break
        u = prev.get(u)
    if path[-1] != source:
        return []
    path.reverse()
    return path


def find_route(graph: Graph, source: str, target: str, cost: CostSelector = "driving",
               allowed: Optional[EdgePredicate] = None) -> Tuple[List[str], float]:
    """
    Wrapper: devuelve (path, cost). Si no hay camino, devuelve ([], inf).
    Un nodo desconocido no tiene ruta, ni siquiera hacia sí mismo.
    """
    if source not in graph:
        logger.debug("Unknown source node %r", source)
        return [], math.inf
    dist, prev = weighted_search(graph, source, cost, allowed)
    path = reconstruct_path(prev, source, target)
    if not path:
        logger.debug("No route %s -> %s", source, target)
        return [], math.inf
    return path, dist[target]


# -------------------------
# VARIANTES
# -------------------------
def shortest_path(graph: Graph, source: str, dest: str) -> List[str]:
    """Ruta más rápida en coche, sin restricciones."""
    path, _ = find_route(graph, source, dest, "driving")
    return path


def restricted_path(graph: Graph, source: str, dest: str,
                    avoid_nodes: Optional[Iterable[str]] = None,
                    avoid_segments: Optional[Iterable] = None,
                    include_node: Optional[str] = None,
                    cost: CostSelector = "driving") -> List[str]:
    """
    Ruta que evita nodos y segmentos. Con include_node se calculan dos tramos
    (source -> include_node -> dest) y se unen sin repetir el nodo de enlace;
    si cualquiera de los tramos falla el resultado es [] (nunca una ruta parcial).
    """
    allowed = avoiding(avoid_nodes, avoid_segments)
    if not include_node:
        path, _ = find_route(graph, source, dest, cost, allowed)
        return path

    first, _ = find_route(graph, source, include_node, cost, allowed)
    second, _ = find_route(graph, include_node, dest, cost, allowed)
    if not first or not second:
        return []
    return first[:-1] + second


def alternative_path(graph: Graph, source: str, dest: str, main_path: Sequence[str]) -> List[str]:
    """
    Segunda ruta independiente: evita los nodos interiores de main_path y
    todos sus segmentos. Con menos de 2 nodos en main_path no hay nada que
    evitar y equivale a shortest_path.
    """
    main_path = list(main_path or [])
    if len(main_path) < 2:
        return shortest_path(graph, source, dest)
    avoid_nodes = set(main_path[1:-1])
    avoid_segments = {segment(a, b) for a, b in zip(main_path, main_path[1:])}
    return restricted_path(graph, source, dest, avoid_nodes, avoid_segments)


def eco_route(graph: Graph, source: str, dest: str, max_walk_time: Optional[int],
              parking_codes: Iterable[str],
              avoid_nodes: Optional[Iterable[str]] = None,
              avoid_segments: Optional[Iterable] = None) -> EcoRoute:
    """
    Conducir hasta un parque, aparcar y caminar hasta el destino.
    parking_codes: nodos con parque en el orden de la tabla de locales.
    max_walk_time: tope del tramo a pie (None = sin tope).
    Criterio: menor tiempo total; en empate, el de mayor tiempo a pie;
    si sigue el empate, el primero en el orden de la tabla.
    """
    candidates = list(parking_codes)
    if not candidates:
        logger.info("Eco route %s -> %s: no parking nodes", source, dest)
        return EcoRoute([], None, [], NO_PARKING_MESSAGE)

    avoid_nodes = set(avoid_nodes or ())
    allowed = avoiding(avoid_nodes, avoid_segments)

    # (total, walk_time, park, drive_path, walk_path)
    best = None
    for park in candidates:
        if park in avoid_nodes:
            continue
        drive_path, drive_time = find_route(graph, source, park, "driving", allowed)
        if not drive_path:
            logger.debug("Parking %s rejected: unreachable by car", park)
            continue
        walk_path, walk_time = find_route(graph, park, dest, "walking", allowed)
        if not walk_path:
            logger.debug("Parking %s rejected: destination unreachable on foot", park)
            continue
        if max_walk_time is not None and walk_time > max_walk_time:
            logger.debug("Parking %s rejected: walk %s > %s", park, walk_time, max_walk_time)
            continue

        total = drive_time + walk_time
        if best is None or total < best[0] or (total == best[0] and walk_time > best[1]):
            best = (total, walk_time, park, drive_path, walk_path)

    if best is None:
        logger.info("Eco route %s -> %s: no viable candidate", source, dest)
        return EcoRoute([], None, [], NO_VIABLE_ROUTE_MESSAGE)

    total, walk_time, park, drive_path, walk_path = best
    logger.info("Eco route %s -> %s via %s (total %s, walk %s)", source, dest, park, total, walk_time)
    return EcoRoute(drive_path, park, walk_path, ECO_ROUTE_FOUND_MESSAGE)


# -------------------------
# COSTE DE UN CAMINO
# -------------------------
def path_cost(graph: Graph, path: Sequence[str], mode: CostSelector = "driving") -> Optional[int]:
    """
    Suma el coste del modo a lo largo de path.
    Caminos de 0 o 1 nodos cuestan 0. Devuelve INVALID_COST (None) si algún par
    consecutivo no es arista o ninguna de sus aristas admite el modo.
    Con aristas paralelas se usa la más barata, igual que en la búsqueda.
    """
    edge_cost = _cost_getter(mode)
    if len(path) < 2:
        return 0
    total = 0
    for u, v in zip(path, path[1:]):
        costs = [c for c in (edge_cost(d) for d in graph.edge_data(u, v)) if c is not None]
        if not costs:
            return INVALID_COST
        total += min(costs)
    return total


def driving_time(graph: Graph, path: Sequence[str]) -> Optional[int]:
    return path_cost(graph, path, "driving")


def walking_time(graph: Graph, path: Sequence[str]) -> Optional[int]:
    return path_cost(graph, path, "walking")


def path_length(graph: Graph, path: Sequence[str]) -> Optional[int]:
    """Número de segmentos del camino, o None si algún par no es arista."""
    if len(path) < 2:
        return 0
    for u, v in zip(path, path[1:]):
        if not graph.edge_data(u, v):
            return None
    return len(path) - 1
