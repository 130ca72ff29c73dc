# src/route_planner/viz/visualizer.py
"""
Visualizador sencillo que usa networkx + matplotlib para dibujar la red y
resaltar una ruta (tramo en coche en rojo, tramo a pie en verde).
Si no están instalados, lanza ImportError al importarlo (la CLI lo maneja).
"""
import networkx as nx
import matplotlib.pyplot as plt


def _path_edges(path):
    return [(path[i], path[i + 1]) for i in range(len(path) - 1)]


def visualize_route(graph, drive_path, walk_path=None, title="Ruta", show=True):
    """
    graph: Graph con graph.edges (Edge(u, v, EdgeData))
    drive_path / walk_path: listas de códigos (ordenados)
    Devuelve la figura de matplotlib.
    """
    G = nx.Graph(graph.to_networkx())

    fig = plt.figure(figsize=(10, 7))
    pos = nx.spring_layout(G, seed=42)

    nx.draw_networkx_nodes(G, pos, node_size=60, node_color="lightgray")
    nx.draw_networkx_edges(G, pos, width=0.8, alpha=0.5)
    # etiquetas solo si la red es pequeña
    if len(G.nodes) < 200:
        nx.draw_networkx_labels(G, pos, font_size=7)

    if drive_path:
        nx.draw_networkx_nodes(G, pos, nodelist=list(drive_path), node_size=120, node_color="red")
        nx.draw_networkx_edges(G, pos, edgelist=_path_edges(drive_path), width=2.5, edge_color="red")
    if walk_path:
        nx.draw_networkx_nodes(G, pos, nodelist=list(walk_path), node_size=120, node_color="green")
        nx.draw_networkx_edges(G, pos, edgelist=_path_edges(walk_path), width=2.5,
                               edge_color="green", style="dashed")

    plt.title(title)
    plt.axis("off")
    if show:
        plt.show()
    return fig
