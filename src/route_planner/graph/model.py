# src/route_planner/graph/model.py
from collections import defaultdict, namedtuple
from typing import Dict, List, Optional, Tuple

# driving / walking: minutos (int) o None si ese modo no puede usar la conexión
EdgeData = namedtuple("EdgeData", ["driving", "walking"])
Edge = namedtuple("Edge", ["u", "v", "data"])

MODES = ("driving", "walking")


class Graph:
    """
    Grafo bidireccional con dos costes por conexión (conducción y a pie).
    - adj: map node -> list[(neighbor, EdgeData)]
    - nodes: set de nodos
    - edges: lista de Edge, una por conexión añadida (sin el sentido inverso)
    Se permiten aristas paralelas. El grafo no conoce "no dirigido":
    add_edge simplemente inserta u->v y v->u con el mismo EdgeData.
    """
    def __init__(self):
        self.adj: Dict[str, List[Tuple[str, EdgeData]]] = defaultdict(list)
        self.nodes = set()
        self.edges: List[Edge] = []

    def add_node(self, node: str):
        self.nodes.add(node)
        # ensure adjacency entry exists
        _ = self.adj[node]

    def add_edge(self, u: str, v: str, driving: Optional[int] = None, walking: Optional[int] = None):
        """
        Añade la conexión u<->v con tiempos de conducción y a pie.
        None en cualquiera de los dos significa "no disponible" para ese modo.
        """
        for label, value in (("driving", driving), ("walking", walking)):
            if value is not None and value < 0:
                raise ValueError(f"Negative {label} time on edge {u}-{v}: {value}")
        data = EdgeData(driving, walking)
        self.nodes.add(u)
        self.nodes.add(v)
        self.adj[u].append((v, data))
        self.adj[v].append((u, data))
        self.edges.append(Edge(u, v, data))

    def neighbors(self, u: str) -> List[Tuple[str, EdgeData]]:
        # nodo desconocido -> lista vacía, nunca KeyError
        return self.adj.get(u, [])

    def edge_data(self, u: str, v: str) -> List[EdgeData]:
        return [data for w, data in self.neighbors(u) if w == v]

    def has_node(self, u: str) -> bool:
        return u in self.nodes

    def edge_count(self) -> int:
        return len(self.edges)

    def to_networkx(self):
        """
        Crea un networkx MultiGraph con atributos 'driving' y 'walking'.
        Requiere networkx instalado.
        """
        import networkx as nx
        G = nx.MultiGraph()
        for n in self.nodes:
            G.add_node(n)
        for e in self.edges:
            G.add_edge(e.u, e.v, driving=e.data.driving, walking=e.data.walking)
        return G

    def __contains__(self, u) -> bool:
        return u in self.nodes

    def __len__(self):
        return len(self.nodes)
