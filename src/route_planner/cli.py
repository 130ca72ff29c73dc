# src/route_planner/cli.py
import argparse
import logging
import os
import sys

from route_planner.batch import (
    DRIVING,
    ECO,
    RESTRICTED,
    RouteRequest,
    parse_id_list,
    parse_segments,
    process_batch_file,
    render,
    solve,
)
from route_planner.graph.algorithms import shortest_path, driving_time
from route_planner.graph.loaders import load_network
from route_planner.io import format_route, route_frame

# visualización opcional
try:
    from route_planner.viz.visualizer import visualize_route
    HAS_VIS = True
except ImportError:
    HAS_VIS = False

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
DEFAULT_DATA_DIR = os.path.join(PROJECT_ROOT, "data")
DEFAULT_LOCATIONS_PATH = os.path.join(DEFAULT_DATA_DIR, "Locations.csv")
DEFAULT_DISTANCES_PATH = os.path.join(DEFAULT_DATA_DIR, "Distances.csv")
DEFAULT_BATCH_INPUT = "input.txt"
DEFAULT_BATCH_OUTPUT = "output.txt"

MENU = """
==========================
=== Elige una opción: ===
==========================
1. Ruta más rápida
2. Segunda ruta más rápida independiente
3. Ruta con exclusión de puntos/segmentos
4. Ruta eco (coche + a pie)
5. Modo batch (input.txt -> output.txt)
6. Salir
=========================="""


def load(args):
    return load_network(args.locations, args.distances)


def _print_outcome(graph, locations, outcome, details=False, plot=False):
    for line in render(graph, locations, outcome):
        print(line)

    if details and outcome.primary:
        print(route_frame(graph, outcome.primary, locations, "driving").to_string(index=False))
        if outcome.request.mode == ECO and outcome.secondary:
            print(route_frame(graph, outcome.secondary, locations, "walking").to_string(index=False))

    if plot:
        if not HAS_VIS:
            print("Visualización no disponible. Instala networkx y matplotlib.")
        elif outcome.primary:
            walk = outcome.secondary if outcome.request.mode == ECO else None
            visualize_route(graph, outcome.primary, walk,
                            title=f"Ruta: {outcome.request.source} → {outcome.request.destination}")


def _request_from_args(args, mode):
    return RouteRequest(
        mode=mode,
        source=args.src,
        destination=args.dst,
        avoid_nodes=parse_id_list(getattr(args, "avoid_nodes", None) or ""),
        avoid_segments=parse_segments(getattr(args, "avoid_segments", None) or ""),
        include_node=getattr(args, "include", None),
        max_walk_time=getattr(args, "max_walk", None),
    )


def _check_ids(locations, *ids):
    for loc_id in ids:
        if loc_id is not None and locations.code_by_id(loc_id) is None:
            raise ValueError(f"Id de local desconocido: {loc_id}")


def cmd_route(args):
    g, locations = load(args)
    _check_ids(locations, args.src, args.dst)
    src, dst = locations.code_by_id(args.src), locations.code_by_id(args.dst)
    path = shortest_path(g, src, dst)
    print("=== RESULTADO ===")
    if not path:
        print("Ruta imposible entre", args.src, "y", args.dst)
        return 0
    print(format_route("BestDrivingRoute", path, driving_time(g, path), locations))
    if args.details:
        print(route_frame(g, path, locations).to_string(index=False))
    if args.plot:
        if not HAS_VIS:
            print("Visualización no disponible. Instala networkx y matplotlib.")
        else:
            visualize_route(g, path, title=f"Ruta: {args.src} → {args.dst}")
    return 0


def _cmd_request(mode):
    def run(args):
        g, locations = load(args)
        request = _request_from_args(args, mode)
        _check_ids(locations, request.source, request.destination, request.include_node)
        print("=== RESULTADO ===")
        _print_outcome(g, locations, solve(g, locations, request),
                       details=args.details, plot=args.plot)
        return 0
    return run


def cmd_batch(args):
    g, locations = load(args)
    lines = process_batch_file(g, locations, args.input, args.output)
    print("Batch procesado. Revisa el fichero", args.output)
    if args.echo:
        for line in lines:
            print(line)
    return 0


def cmd_locations(args):
    _, locations = load(args)
    items = list(locations)
    if args.limit:
        items = items[: args.limit]
    namew = max([len(loc.name) for loc in items] + [len("name")])
    print(f"{'id':>5}  {'code':<8}  {'name'.ljust(namew)}  parking")
    for loc in items:
        print(f"{loc.id:>5}  {loc.code:<8}  {loc.name.ljust(namew)}  {'sí' if loc.has_parking else 'no'}")
    return 0


# -------------------------
# MENÚ INTERACTIVO
# -------------------------
def _ask_int(input_fn, prompt, optional=False):
    raw = input_fn(prompt).strip()
    if optional and not raw:
        return None
    return int(raw)


def _handle_option(option, g, locations, input_fn, batch_input, batch_output):
    if option == 5:
        process_batch_file(g, locations, batch_input, batch_output)
        print(f"Batch procesado. Revisa el fichero {batch_output}")
        return
    if option not in (1, 2, 3, 4):
        print("Opción inválida. Inténtalo de nuevo.")
        return

    src = _ask_int(input_fn, "Id de origen: ")
    dst = _ask_int(input_fn, "Id de destino: ")
    _check_ids(locations, src, dst)

    if option == 1:
        path = shortest_path(g, locations.code_by_id(src), locations.code_by_id(dst))
        if not path:
            print("Ruta imposible.")
        else:
            print(format_route("BestDrivingRoute", path, driving_time(g, path), locations))
        return

    request = RouteRequest(mode=DRIVING, source=src, destination=dst)
    if option in (3, 4):
        request.avoid_nodes = parse_id_list(input_fn("Nodos a evitar (ej. 1,2; vacío = ninguno): "))
        request.avoid_segments = parse_segments(input_fn("Segmentos a evitar (ej. (1,2),(3,4)): "))
    if option == 3:
        request.mode = RESTRICTED
        request.include_node = _ask_int(input_fn, "Nodo obligatorio (vacío = ninguno): ", optional=True)
        _check_ids(locations, request.include_node)
    elif option == 4:
        request.mode = ECO
        request.max_walk_time = _ask_int(input_fn, "Tiempo máximo a pie: ")

    for line in render(g, locations, solve(g, locations, request)):
        print(line)


def run_menu(g, locations, input_fn=None, batch_input=DEFAULT_BATCH_INPUT, batch_output=DEFAULT_BATCH_OUTPUT):
    input_fn = input_fn or input
    print("=== Datos analizados: ===")
    print("Locales:", len(locations))
    print("Segmentos:", g.edge_count())
    while True:
        print(MENU)
        try:
            raw = input_fn("> ")
        except EOFError:
            return
        try:
            option = int(raw.strip())
        except ValueError:
            print("Entrada inválida. Introduce un número.")
            continue
        if option == 6:
            print("Saliendo de la aplicación. ¡Gracias!")
            return
        try:
            _handle_option(option, g, locations, input_fn, batch_input, batch_output)
        except (ValueError, FileNotFoundError) as e:
            print("Error:", e)


def cmd_menu(args):
    g, locations = load(args)
    run_menu(g, locations, batch_input=args.input, batch_output=args.output)
    return 0


# -------------------------
# ARGPARSE
# -------------------------
def build_parser():
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--locations", default=DEFAULT_LOCATIONS_PATH, help="CSV de locales (Location,Id,Code,Parking)")
    common.add_argument("--distances", default=DEFAULT_DISTANCES_PATH, help="CSV de segmentos (Location1,Location2,Driving,Walking)")
    common.add_argument("--log-level", default="WARNING", choices=["DEBUG", "INFO", "WARNING", "ERROR"])

    route_opts = argparse.ArgumentParser(add_help=False)
    route_opts.add_argument("--from", dest="src", type=int, required=True, help="id de origen")
    route_opts.add_argument("--to", dest="dst", type=int, required=True, help="id de destino")
    route_opts.add_argument("--details", action="store_true", help="Mostrar la tabla paso a paso")
    route_opts.add_argument("--plot", action="store_true", help="Mostrar gráfica de la ruta (si hay dependencias)")

    avoid_opts = argparse.ArgumentParser(add_help=False)
    avoid_opts.add_argument("--avoid-nodes", help="ids a evitar, ej. 1,2")
    avoid_opts.add_argument("--avoid-segments", help="segmentos a evitar, ej. (1,2),(3,4)")

    batch_opts = argparse.ArgumentParser(add_help=False)
    batch_opts.add_argument("--input", default=DEFAULT_BATCH_INPUT, help="fichero de petición")
    batch_opts.add_argument("--output", default=DEFAULT_BATCH_OUTPUT, help="fichero de resultado")

    p = argparse.ArgumentParser(prog="route-planner")
    sub = p.add_subparsers(dest="cmd", required=True)

    pr = sub.add_parser("route", parents=[common, route_opts], help="Ruta más rápida en coche")
    pr.set_defaults(func=cmd_route)

    pa = sub.add_parser("alternative", parents=[common, route_opts], help="Ruta más rápida y alternativa independiente")
    pa.set_defaults(func=_cmd_request(DRIVING))

    prs = sub.add_parser("restricted", parents=[common, route_opts, avoid_opts], help="Ruta evitando nodos/segmentos")
    prs.add_argument("--include", type=int, help="id de paso obligatorio")
    prs.set_defaults(func=_cmd_request(RESTRICTED))

    pe = sub.add_parser("eco", parents=[common, route_opts, avoid_opts], help="Coche hasta un parque y luego a pie")
    pe.add_argument("--max-walk", type=int, required=True, help="tiempo máximo a pie")
    pe.set_defaults(func=_cmd_request(ECO))

    pb = sub.add_parser("batch", parents=[common, batch_opts], help="Procesar un fichero de petición")
    pb.add_argument("--echo", action="store_true", help="Imprimir también el resultado")
    pb.set_defaults(func=cmd_batch)

    pm = sub.add_parser("menu", parents=[common, batch_opts], help="Menú interactivo")
    pm.set_defaults(func=cmd_menu)

    pl = sub.add_parser("locations", parents=[common], help="Listar locales")
    pl.add_argument("--limit", type=int, help="máximo de filas")
    pl.set_defaults(func=cmd_locations)
    return p


def main(argv=None):
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level),
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")
    try:
        return args.func(args)
    except (FileNotFoundError, ValueError) as e:
        print("Error:", e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
