#!/usr/bin/env python3
# scripts/list_locations.py
"""
Lista los locales legibles (id, code, name, parking).
Uso:
  python scripts/list_locations.py --limit 50
  python scripts/list_locations.py --format csv --out outputs/locations.csv
"""
from pathlib import Path
import argparse
import sys

import pandas as pd

from route_planner.graph.loaders import read_locations

ROOT = Path(__file__).resolve().parents[1]


def pretty_print(df: pd.DataFrame, limit: int = None):
    if limit:
        df = df.head(limit)
    idw = max(df["id"].astype(str).str.len().max() if len(df) else 0, len("id"))
    namew = max(df["name"].str.len().max() if len(df) else 0, len("name"))
    print(f"{'id'.ljust(idw)}   {'code'.ljust(6)}   {'name'.ljust(namew)}   parking")
    print("-" * (idw + namew + 26))
    for r in df.itertuples(index=False):
        print(f"{str(r.id).ljust(idw)}   {r.code.ljust(6)}   {r.name.ljust(namew)}   {'yes' if r.has_parking else 'no'}")


def main(argv=None):
    p = argparse.ArgumentParser(description="List locations (id, code, name, parking)")
    p.add_argument("--locations", "-l", default=str(ROOT / "data" / "Locations.csv"), help="CSV de locales")
    p.add_argument("--format", "-f", choices=("pretty", "csv"), default="pretty", help="Formato de salida")
    p.add_argument("--out", "-o", default=None, help="Ruta de salida si --format csv")
    p.add_argument("--limit", "-n", type=int, default=None, help="Mostrar solo primeras N filas (pretty)")
    p.add_argument("--parking-only", action="store_true", help="Solo locales con parque")
    args = p.parse_args(argv)

    try:
        table = read_locations(args.locations)
    except (FileNotFoundError, ValueError) as e:
        print("No pude leer los locales:", e, file=sys.stderr)
        return 2

    df = pd.DataFrame(list(table), columns=["id", "name", "code", "has_parking"])
    if args.parking_only:
        df = df[df["has_parking"]]

    if args.format == "csv":
        out_path = Path(args.out) if args.out else Path("locations.csv")
        out_path.parent.mkdir(parents=True, exist_ok=True)
        df.to_csv(out_path, index=False)
        print("Saved:", out_path)
    else:
        pretty_print(df, limit=args.limit)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
