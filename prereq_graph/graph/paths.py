"""
Read-only queries over a finished concept graph.

An edge `from -> to` means "from requires to", so study order runs the other way:
every query walks `to => from`, from prerequisites towards the target.
"""

import heapq
import logging
import math
from collections import deque
from collections.abc import Iterator

from .models import ConceptNode, Graph, GraphSummary, StudyPath

logger = logging.getLogger(__name__)


class _StudyGraph:
    """Index over a `Graph` shared by all queries"""

    def __init__(self, graph: Graph):
        self.nodes: dict[str, ConceptNode] = {}
        for node in graph.nodes:
            self.nodes.setdefault(node.id, node)
        self.order: dict[str, int] = {node_id: i for i, node_id in enumerate(self.nodes)}

        # prerequisite -> dependents, dependent -> prerequisites
        self.dependents: dict[str, list[str]] = {node_id: [] for node_id in self.nodes}
        self.prerequisites: dict[str, list[str]] = {node_id: [] for node_id in self.nodes}

        seen: set[tuple[str, str]] = set()
        for edge in graph.edges:
            pair = (edge.from_id, edge.to_id)
            if pair in seen:
                continue
            seen.add(pair)
            if edge.from_id not in self.nodes or edge.to_id not in self.nodes:
                logger.debug('Ignoring edge %s -> %s with unknown node', *pair)
                continue
            self.dependents[edge.to_id].append(edge.from_id)
            self.prerequisites[edge.from_id].append(edge.to_id)

        self.target: ConceptNode | None = next(
            (node for node in self.nodes.values() if node.kind == 'target'), None
        )

    def starting_candidates(self) -> list[ConceptNode]:
        """Concepts a learner can start from: foundational ones and ones without prerequisites"""
        return [
            node
            for node in self.nodes.values()
            if node.kind == 'concept'
            and (node.is_foundational or not self.prerequisites[node.id])
        ]

    def path_hours(self, path: list[ConceptNode]) -> float:
        return sum(node.study_hours for node in path)

    def dijkstra(self, start_id: str, target_id: str) -> list[str]:
        """
        Cheapest path from `start_id` to `target_id` as a list of ids, empty if unreachable.

        Leaving a node costs its study hours. Each node is finalized at most once,
        so cycles are harmless; equal distances are settled in node order.
        """
        distances: dict[str, float] = {start_id: 0}
        previous: dict[str, str] = {}
        finalized: set[str] = set()
        queue: list[tuple[float, int, str]] = [(0, self.order[start_id], start_id)]

        while queue:
            distance, _, current = heapq.heappop(queue)
            if current in finalized:
                continue
            finalized.add(current)
            if current == target_id:
                break

            weight = self.nodes[current].study_hours
            for neighbor in self.dependents[current]:
                if neighbor in finalized:
                    continue
                alternative = distance + weight
                if alternative < distances.get(neighbor, math.inf):
                    distances[neighbor] = alternative
                    previous[neighbor] = current
                    heapq.heappush(queue, (alternative, self.order[neighbor], neighbor))

        if target_id not in finalized:
            return []

        path = [target_id]
        while path[-1] != start_id:
            path.append(previous[path[-1]])
        path.reverse()
        return path


def shortest_study_path(graph: Graph) -> StudyPath:
    """
    Find the cheapest study path from any starting concept to the target.

    Every starting candidate (see `_StudyGraph.starting_candidates`) is tried in
    node order; the first candidate with the strictly smallest total wins.

    Returns
    -------
    StudyPath
        Nodes from the chosen start to the target inclusive and the sum of their
        study hours. Empty path with zero hours when the target is unreachable.
    """
    index = _StudyGraph(graph)
    if index.target is None:
        return StudyPath()

    best: list[ConceptNode] = []
    best_hours = math.inf
    for candidate in index.starting_candidates():
        ids = index.dijkstra(candidate.id, index.target.id)
        if not ids:
            continue
        path = [index.nodes[node_id] for node_id in ids]
        hours = index.path_hours(path)
        if hours < best_hours:
            best, best_hours = path, hours

    if not best:
        return StudyPath()
    return StudyPath(path=best, total_hours=best_hours)


def topological_study_order(graph: Graph) -> list[ConceptNode]:
    """
    Order all concepts so that prerequisites come before their dependents.

    Kahn's algorithm with a FIFO queue. Nodes on a cycle, or depending on one,
    never become free and are left out of the result.
    """
    index = _StudyGraph(graph)
    in_degree = {node_id: len(prereqs) for node_id, prereqs in index.prerequisites.items()}
    queue = deque(node_id for node_id, degree in in_degree.items() if degree == 0)

    order: list[ConceptNode] = []
    while queue:
        current = queue.popleft()
        order.append(index.nodes[current])
        for neighbor in index.dependents[current]:
            in_degree[neighbor] -= 1
            if in_degree[neighbor] == 0:
                queue.append(neighbor)

    if len(order) < len(index.nodes):
        logger.debug('Study order omits %d nodes on cycles', len(index.nodes) - len(order))
    return order


def all_study_paths(graph: Graph) -> list[StudyPath]:
    """Every simple path from every starting candidate to the target"""
    index = _StudyGraph(graph)
    if index.target is None:
        return []
    target_id = index.target.id

    paths: list[StudyPath] = []
    visited: set[str] = set()
    current_path: list[ConceptNode] = []
    # (node id, dependents not tried yet); chains may be longer than the recursion limit
    stack: list[tuple[str, Iterator[str]]] = []

    def _enter(node_id: str):
        visited.add(node_id)
        current_path.append(index.nodes[node_id])
        if node_id == target_id:
            found = list(current_path)
            paths.append(StudyPath(path=found, total_hours=index.path_hours(found)))
            stack.append((node_id, iter(())))
        else:
            stack.append((node_id, iter(index.dependents[node_id])))

    for candidate in index.starting_candidates():
        _enter(candidate.id)
        while stack:
            node_id, neighbors = stack[-1]
            neighbor = next((n for n in neighbors if n not in visited), None)
            if neighbor is None:
                stack.pop()
                visited.discard(node_id)
                current_path.pop()
            else:
                _enter(neighbor)

    return paths


def summarize_graph(graph: Graph) -> GraphSummary:
    concepts = [node for node in graph.nodes if node.kind == 'concept']
    return GraphSummary(
        concept_count=len(concepts),
        edge_count=len(graph.edges),
        foundational_count=sum(1 for node in concepts if node.is_foundational),
        total_hours=sum(node.study_hours for node in concepts),
        max_depth=max((node.depth for node in graph.nodes), default=0),
    )
