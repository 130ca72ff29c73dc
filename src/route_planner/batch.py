# src/route_planner/batch.py
"""
Modo batch: lee un fichero de petición con líneas 'Clave:valor'
(Mode, Source, Destination, AvoidNodes, AvoidSegments, IncludeNode,
MaxWalkTime), calcula la ruta pedida y escribe el resultado usando
los ids externos de los locales.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Set, Tuple

from route_planner.graph.algorithms import (
    alternative_path,
    driving_time,
    eco_route,
    restricted_path,
    shortest_path,
    walking_time,
)
from route_planner.graph.loaders import LocationTable
from route_planner.graph.model import Graph
from route_planner.io import external_id, format_route, read_lines, write_lines

logger = logging.getLogger(__name__)

DRIVING = "driving"
RESTRICTED = "driving-restricted"
ECO = "driving-walking"
REQUEST_MODES = (DRIVING, RESTRICTED, ECO)

_SEGMENT_RE = re.compile(r"\(\s*(-?\d+)\s*,\s*(-?\d+)\s*\)")


class BatchError(ValueError):
    """Fichero de petición mal formado."""


@dataclass
class RouteRequest:
    mode: str
    source: int
    destination: int
    avoid_nodes: Set[int] = field(default_factory=set)
    avoid_segments: Set[Tuple[int, int]] = field(default_factory=set)
    include_node: Optional[int] = None
    max_walk_time: Optional[int] = None


@dataclass
class RouteOutcome:
    """
    primary: ruta principal (mejor / restringida / tramo en coche)
    secondary: ruta alternativa o tramo a pie
    """
    request: RouteRequest
    primary: List[str]
    secondary: List[str] = field(default_factory=list)
    park: Optional[str] = None
    message: str = ""


# -------------------------
# PARSER
# -------------------------
def _parse_int(value: str, key: str) -> int:
    try:
        return int(value.strip())
    except ValueError:
        raise BatchError(f"{key}: se esperaba un entero, encontrado {value!r}") from None


def parse_id_list(value: str, key: str = "AvoidNodes") -> Set[int]:
    """'1,2,3' -> {1, 2, 3}; entradas vacías se ignoran."""
    return {_parse_int(part, key) for part in value.split(",") if part.strip()}


def parse_segments(value: str, key: str = "AvoidSegments") -> Set[Tuple[int, int]]:
    """'(1,2),(3,4)' -> {(1, 2), (3, 4)}."""
    pairs = {(int(a), int(b)) for a, b in _SEGMENT_RE.findall(value)}
    leftover = _SEGMENT_RE.sub("", value).replace(",", "").strip()
    if leftover:
        raise BatchError(f"{key}: formato inválido {value!r}; se espera (id1,id2),(id3,id4)")
    return pairs


def parse_request(lines: Iterable[str]) -> RouteRequest:
    """
    Construye un RouteRequest a partir de las líneas del fichero.
    Las claves desconocidas se ignoran; las opcionales pueden ir vacías.
    """
    mode = None
    source = destination = None
    include_node = max_walk_time = None
    avoid_nodes: Set[int] = set()
    avoid_segments: Set[Tuple[int, int]] = set()

    for raw in lines:
        key, sep, value = raw.partition(":")
        if not sep:
            continue
        key = key.strip()
        value = value.strip()
        if key == "Mode":
            mode = value
        elif key == "Source":
            source = _parse_int(value, key)
        elif key == "Destination":
            destination = _parse_int(value, key)
        elif key == "IncludeNode" and value:
            include_node = _parse_int(value, key)
        elif key == "MaxWalkTime" and value:
            max_walk_time = _parse_int(value, key)
        elif key == "AvoidNodes" and value:
            avoid_nodes |= parse_id_list(value, key)
        elif key == "AvoidSegments" and value:
            avoid_segments |= parse_segments(value, key)

    if mode not in REQUEST_MODES:
        raise BatchError(f"Mode inválido o ausente: {mode!r}; opciones: {', '.join(REQUEST_MODES)}")
    if source is None or destination is None:
        raise BatchError("Faltan Source y/o Destination")
    return RouteRequest(mode, source, destination, avoid_nodes, avoid_segments,
                        include_node, max_walk_time)


def read_request(path) -> RouteRequest:
    return parse_request(read_lines(path))


# -------------------------
# EJECUCIÓN
# -------------------------
def _code(locations: LocationTable, loc_id: int) -> str:
    code = locations.code_by_id(loc_id)
    if code is None:
        # id desconocido: se trata como un nodo sin ruta posible
        logger.warning("Unknown location id %s", loc_id)
        return ""
    return code


def solve(graph: Graph, locations: LocationTable, request: RouteRequest) -> RouteOutcome:
    """Traduce ids a códigos y ejecuta la búsqueda que pide request.mode."""
    src = _code(locations, request.source)
    dst = _code(locations, request.destination)
    avoid_nodes = {_code(locations, i) for i in request.avoid_nodes} - {""}
    avoid_segments = {(_code(locations, a), _code(locations, b)) for a, b in request.avoid_segments}

    if request.mode == DRIVING:
        best = shortest_path(graph, src, dst)
        alt = alternative_path(graph, src, dst, best)
        return RouteOutcome(request, best, alt)

    if request.mode == RESTRICTED:
        include = _code(locations, request.include_node) if request.include_node is not None else None
        if request.include_node is not None and not include:
            return RouteOutcome(request, [])
        path = restricted_path(graph, src, dst, avoid_nodes, avoid_segments, include_node=include)
        return RouteOutcome(request, path)

    if request.mode == ECO:
        eco = eco_route(graph, src, dst, request.max_walk_time, locations.parking_codes(),
                        avoid_nodes, avoid_segments)
        return RouteOutcome(request, eco.drive_path, eco.walk_path, eco.park, eco.message)

    raise BatchError(f"Mode inválido: {request.mode!r}")


def render(graph: Graph, locations: LocationTable, outcome: RouteOutcome) -> List[str]:
    """Líneas de salida en el formato del fichero output."""
    request = outcome.request
    lines = [f"Source:{request.source}", f"Destination:{request.destination}"]

    if request.mode == DRIVING:
        lines.append(format_route("BestDrivingRoute", outcome.primary,
                                  driving_time(graph, outcome.primary), locations))
        lines.append(format_route("AlternativeDrivingRoute", outcome.secondary,
                                  driving_time(graph, outcome.secondary), locations))
    elif request.mode == RESTRICTED:
        lines.append(format_route("RestrictedDrivingRoute", outcome.primary,
                                  driving_time(graph, outcome.primary), locations))
    elif not outcome.primary or not outcome.secondary:
        lines += [
            "DrivingRoute:none",
            "ParkingNode:none",
            "WalkingRoute:none",
            "TotalTime:",
            f"Message:{outcome.message}",
        ]
    else:
        drive = driving_time(graph, outcome.primary)
        walk = walking_time(graph, outcome.secondary)
        lines += [
            format_route("DrivingRoute", outcome.primary, drive, locations),
            f"ParkingNode:{external_id(outcome.park, locations)}",
            format_route("WalkingRoute", outcome.secondary, walk, locations),
            f"TotalTime:{drive + walk}",
        ]
    return lines


def run_request(graph: Graph, locations: LocationTable, request: RouteRequest) -> List[str]:
    return render(graph, locations, solve(graph, locations, request))


def process_batch_file(graph: Graph, locations: LocationTable, input_path, output_path) -> List[str]:
    """Lee input_path, calcula la ruta y escribe el resultado en output_path."""
    request = read_request(input_path)
    logger.info("Batch request %s: %s -> %s", request.mode, request.source, request.destination)
    lines = run_request(graph, locations, request)
    write_lines(lines, output_path)
    return lines
