# src/route_planner/graph/loaders.py
import logging
from collections import namedtuple
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from route_planner.graph.model import Graph

logger = logging.getLogger(__name__)

Location = namedtuple("Location", ["id", "name", "code", "has_parking"])

LOCATION_COLUMNS = ["name", "id", "code", "parking"]
DISTANCE_COLUMNS = ["source", "target", "driving", "walking"]

# ============================================================
# FUNCIONES AUXILIARES
# ============================================================

def clean_code(code: str) -> str:
    """Quita espacios (incluidos los interiores) de un código de local."""
    return "".join(str(code).split())


def _read_table(path, columns: List[str], label: str) -> pd.DataFrame:
    """
    Lee un CSV con cabecera y renombra sus primeras columnas por posición.
    Todas las celdas se leen como str (sin conversión a NaN).
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"No se encontró el fichero de {label}: {p}")
    try:
        df = pd.read_csv(p, dtype=str, keep_default_na=False, skipinitialspace=True)
    except pd.errors.EmptyDataError as e:
        raise ValueError(f"{p}: fichero de {label} vacío") from e
    if df.shape[1] < len(columns):
        raise ValueError(f"{p}: se esperaban las columnas {columns}, encontradas {list(df.columns)}")
    df = df.iloc[:, : len(columns)].copy()
    df.columns = columns
    return df


def _parse_cost(series: pd.Series, label: str, path) -> pd.Series:
    """'X' o vacío -> <NA>; enteros no negativos -> Int64."""
    raw = series.str.strip()
    unavailable = raw.str.upper().eq("X") | raw.eq("")
    valid = raw.str.fullmatch(r"\d+") | unavailable
    if not valid.all():
        bad = raw[~valid].tolist()[:5]
        raise ValueError(f"{path}: valores de {label} inválidos (se espera entero >= 0 o X): {bad}")
    return pd.to_numeric(raw.where(~unavailable), errors="coerce").astype("Int64")


# ============================================================
# TABLA DE LOCALES
# ============================================================

class LocationTable:
    """
    Tabla ordenada de locales. Mantiene la biyección id <-> código;
    el orden de inserción es el orden de candidatos de parque en eco_route.
    """
    def __init__(self, locations: Iterable[Location] = ()):
        self._locations: List[Location] = []
        self._by_id: Dict[int, Location] = {}
        self._by_code: Dict[str, Location] = {}
        for loc in locations:
            self.add(loc)

    def add(self, loc: Location):
        if loc.id in self._by_id:
            raise ValueError(f"Duplicate location id {loc.id}")
        if loc.code in self._by_code:
            raise ValueError(f"Duplicate location code {loc.code!r}")
        self._locations.append(loc)
        self._by_id[loc.id] = loc
        self._by_code[loc.code] = loc

    def code_by_id(self, loc_id: int) -> Optional[str]:
        loc = self._by_id.get(loc_id)
        return loc.code if loc else None

    def id_by_code(self, code: str) -> Optional[int]:
        loc = self._by_code.get(code)
        return loc.id if loc else None

    def get(self, code: str) -> Optional[Location]:
        return self._by_code.get(code)

    def parking_codes(self) -> List[str]:
        return [loc.code for loc in self._locations if loc.has_parking]

    def __iter__(self) -> Iterator[Location]:
        return iter(self._locations)

    def __len__(self):
        return len(self._locations)

    def __contains__(self, code) -> bool:
        return code in self._by_code


# ============================================================
# LECTORES CSV
# ============================================================

def read_locations(path) -> LocationTable:
    """
    Lee Locations.csv: Location,Id,Code,Parking (por posición, con cabecera).
    Parking == "1" indica que el local tiene parque.
    """
    df = _read_table(path, LOCATION_COLUMNS, "locales")
    ids = df["id"].str.strip()
    bad = ~ids.str.fullmatch(r"-?\d+")
    if bad.any():
        raise ValueError(f"{path}: ids inválidos: {ids[bad].tolist()[:5]}")

    table = LocationTable()
    for name, loc_id, code, parking in zip(df["name"], ids.astype(int), df["code"], df["parking"]):
        table.add(Location(
            id=int(loc_id),
            name=name.strip(),
            code=clean_code(code),
            has_parking=clean_code(parking) == "1",
        ))
    logger.info("Read %d locations from %s", len(table), path)
    return table


def read_distances(path) -> pd.DataFrame:
    """
    Lee Distances.csv: Location1,Location2,Driving,Walking.
    Devuelve DataFrame con columnas source, target, driving, walking
    (driving/walking como Int64 nullable; <NA> = no disponible).
    """
    df = _read_table(path, DISTANCE_COLUMNS, "distancias")
    df["source"] = df["source"].map(clean_code)
    df["target"] = df["target"].map(clean_code)
    empty = df["source"].eq("") | df["target"].eq("")
    if empty.any():
        raise ValueError(f"{path}: {int(empty.sum())} filas sin código de origen o destino")
    df["driving"] = _parse_cost(df["driving"], "driving", path)
    df["walking"] = _parse_cost(df["walking"], "walking", path)
    logger.info("Read %d segments from %s", len(df), path)
    return df


# ============================================================
# CONSTRUCCIÓN DEL GRAFO
# ============================================================

def _optional_int(value) -> Optional[int]:
    return None if pd.isna(value) else int(value)


def build_graph(distances: pd.DataFrame, locations: Optional[LocationTable] = None) -> Graph:
    """
    Construye el Graph a partir del DataFrame de read_distances.
    Si se pasa la tabla de locales, todos sus códigos entran como nodos
    (aunque estén aislados).
    """
    g = Graph()
    if locations is not None:
        for loc in locations:
            g.add_node(loc.code)

    for row in distances.itertuples(index=False):
        g.add_edge(row.source, row.target,
                   driving=_optional_int(row.driving),
                   walking=_optional_int(row.walking))

    if locations is not None:
        unknown = sorted(n for n in g.nodes if n not in locations)
        if unknown:
            logger.warning("Segments reference %d codes missing from the location table: %s",
                           len(unknown), unknown[:10])
    return g


def load_network(locations_path, distances_path) -> Tuple[Graph, LocationTable]:
    """Lee ambos CSV y devuelve (graph, locations)."""
    locations = read_locations(locations_path)
    distances = read_distances(distances_path)
    graph = build_graph(distances, locations)
    logger.info("Graph built: %d nodes, %d segments", len(graph), graph.edge_count())
    return graph, locations
