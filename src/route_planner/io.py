# src/route_planner/io.py
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from route_planner.graph.algorithms import path_cost
from route_planner.graph.loaders import LocationTable
from route_planner.graph.model import Graph


def _ensure_parent(path: Path):
    path.parent.mkdir(parents=True, exist_ok=True)


def external_id(code: str, locations: LocationTable) -> str:
    """Id externo de un código; si no está en la tabla se usa el propio código."""
    loc_id = locations.id_by_code(code)
    return str(loc_id) if loc_id is not None else code


def format_path(path: Sequence[str], locations: LocationTable) -> str:
    return ",".join(external_id(code, locations) for code in path)


def format_route(label: str, path: Sequence[str], cost: Optional[int], locations: LocationTable) -> str:
    """
    'Label:1,2,3(10)' o 'Label:none' si el camino está vacío.
    """
    if not path:
        return f"{label}:none"
    return f"{label}:{format_path(path, locations)}({cost})"


def route_frame(graph: Graph, path: Sequence[str], locations: LocationTable,
                mode: str = "driving") -> pd.DataFrame:
    """
    Tabla paso a paso de una ruta: id, código, nombre, tiempo del tramo
    y tiempo acumulado (para mostrar por consola).
    """
    rows = []
    cumulative = 0
    for i, code in enumerate(path):
        step = 0 if i == 0 else path_cost(graph, path[i - 1:i + 1], mode)
        if step is not None and cumulative is not None:
            cumulative += step
        else:
            cumulative = None
        loc = locations.get(code)
        rows.append({
            "step": i,
            "id": loc.id if loc else None,
            "code": code,
            "name": loc.name if loc else "",
            "segment": step,
            "cumulative": cumulative,
        })
    return pd.DataFrame(rows, columns=["step", "id", "code", "name", "segment", "cumulative"])


def write_lines(lines: Iterable[str], path) -> Path:
    p = Path(path)
    _ensure_parent(p)
    with open(p, "w", encoding="utf-8", newline="\n") as fh:
        for line in lines:
            fh.write(line + "\n")
    return p


def read_lines(path) -> List[str]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(path)
    with open(p, encoding="utf-8") as fh:
        return [line.rstrip("\r\n") for line in fh]
