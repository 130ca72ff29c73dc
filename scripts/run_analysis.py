# scripts/run_analysis.py
"""
Análisis rápido de la red: para cada par (origen, destino) calcula la ruta
más rápida, la alternativa independiente y la ruta eco, y guarda un resumen.
Uso:
  python scripts/run_analysis.py --max-walk 20 --out outputs/analysis.csv
"""
from pathlib import Path
import argparse
import itertools

import pandas as pd

from route_planner.graph.algorithms import (
    alternative_path,
    driving_time,
    eco_route,
    shortest_path,
    walking_time,
)
from route_planner.graph.loaders import load_network

ROOT = Path(__file__).resolve().parents[1]


def analyse(graph, locations, max_walk):
    rows = []
    parking = locations.parking_codes()
    for a, b in itertools.permutations(list(locations), 2):
        best = shortest_path(graph, a.code, b.code)
        alt = alternative_path(graph, a.code, b.code, best)
        eco = eco_route(graph, a.code, b.code, max_walk, parking)
        rows.append({
            "source": a.id,
            "destination": b.id,
            "best": driving_time(graph, best) if best else None,
            "alternative": driving_time(graph, alt) if alt else None,
            "eco_park": locations.id_by_code(eco.park) if eco.found else None,
            "eco_total": (driving_time(graph, eco.drive_path) + walking_time(graph, eco.walk_path))
                         if eco.found else None,
        })
    return pd.DataFrame(rows)


def main(argv=None):
    p = argparse.ArgumentParser(description="Resumen de rutas entre todos los pares de locales")
    p.add_argument("--locations", default=str(ROOT / "data" / "Locations.csv"))
    p.add_argument("--distances", default=str(ROOT / "data" / "Distances.csv"))
    p.add_argument("--max-walk", type=int, default=20)
    p.add_argument("--out", default=None, help="CSV de salida (opcional)")
    args = p.parse_args(argv)

    print("Cargando red desde", args.locations, "y", args.distances)
    graph, locations = load_network(args.locations, args.distances)
    df = analyse(graph, locations, args.max_walk)

    print("Pares analizados:", len(df))
    print("Sin ruta en coche:", int(df["best"].isna().sum()))
    print("Sin alternativa independiente:", int(df["alternative"].isna().sum()))
    print("Sin ruta eco (max walk %s):" % args.max_walk, int(df["eco_total"].isna().sum()))

    if args.out:
        out = Path(args.out)
        out.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out, index=False)
        print("Saved:", out)
    else:
        print(df.head(20).to_string(index=False))
    print("Análisis rápido finalizado.")


if __name__ == "__main__":
    main()
