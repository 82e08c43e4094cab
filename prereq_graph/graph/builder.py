import logging
from collections import deque
from collections.abc import Awaitable
from typing import Protocol, TypeVar

from prereq_graph.errors import GraphBuildError
from prereq_graph.llm_pipelines.models import ConceptHierarchy, ConceptItem, PrerequisiteList

from .keys import (
    clean_name,
    coerce_description,
    coerce_difficulty,
    coerce_study_hours,
    lookup_key,
    mint_node_id,
)
from .models import TARGET_ID, ConceptNode, DependencyEdge, Difficulty, Graph

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ConceptHierarchyProvider(Protocol):
    """Source of a nested concept hierarchy, produced in a single request"""

    async def fetch_hierarchy(self, title: str, abstract: str) -> ConceptHierarchy: ...


class PrerequisiteProvider(Protocol):
    """Source of flat prerequisite lists, one request per concept"""

    async def fetch_requirements(self, title: str, abstract: str) -> list[ConceptItem]: ...

    async def fetch_prerequisites(self, name: str, description: str) -> list[ConceptItem]: ...


class GraphAssembly:
    """
    Node/edge accumulator owned by a single build.

    Keeps two registries: `lookup_key(name) -> node id` for deduplication and
    `node id -> node` for the nodes themselves. Edges are kept in insertion order
    and inserting the same `(from, to)` pair twice is a no-op.
    """

    def __init__(self, title: str):
        self._nodes: dict[str, ConceptNode] = {}
        self._ids_by_key: dict[str, str] = {}
        self._edges: dict[tuple[str, str], DependencyEdge] = {}

        self._nodes[TARGET_ID] = ConceptNode(
            id=TARGET_ID,
            name=title,
            kind='target',
            difficulty=Difficulty.research,
            description='Target research paper',
            study_hours=0,
            depth=0,
        )

    def add_concept(
        self, item: ConceptItem, parent_id: str, depth: int
    ) -> tuple[ConceptNode | None, bool]:
        """
        Register concept item as a prerequisite of `parent_id`.

        Returns
        -------
        tuple[ConceptNode | None, bool]
            The node the item resolved to (None when the item has no usable name)
            and whether the node was created by this call.
        """
        name = clean_name(item.name)
        if name is None:
            logger.debug('Skipping concept without name under %s', parent_id)
            return None, False

        key = lookup_key(name)
        existing_id = self._ids_by_key.get(key)
        if existing_id is not None:
            logger.debug('Concept %r already known as %s', name, existing_id)
            self.link(parent_id, existing_id)
            return self._nodes[existing_id], False

        node = ConceptNode(
            id=mint_node_id(name, depth, taken=self._nodes),
            name=name,
            kind='concept',
            difficulty=coerce_difficulty(item.difficulty),
            description=coerce_description(item.description),
            study_hours=coerce_study_hours(item.estimated_study_hours),
            depth=depth,
            is_foundational=bool(item.is_foundational),
        )
        self._nodes[node.id] = node
        self._ids_by_key[key] = node.id
        self.link(parent_id, node.id)
        return node, True

    def link(self, from_id: str, to_id: str) -> None:
        # a concept listing itself is not a dependency
        if from_id == to_id:
            return
        if (from_id, to_id) not in self._edges:
            self._edges[(from_id, to_id)] = DependencyEdge(from_id=from_id, to_id=to_id)

    def snapshot(self) -> Graph:
        return Graph(nodes=list(self._nodes.values()), edges=list(self._edges.values()))


def _check_title(title: str) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValueError('Title must be a non-empty string')
    return title.strip()


async def _from_source(call: Awaitable[T]) -> T:
    """Await a concept source call, any failure becomes a build failure"""
    try:
        return await call
    except GraphBuildError:
        raise
    except Exception as e:
        raise GraphBuildError(f'Concept source failed: {e}') from e


def _as_hierarchy(result: ConceptHierarchy | dict) -> ConceptHierarchy:
    if isinstance(result, ConceptHierarchy):
        return result
    try:
        return ConceptHierarchy.model_validate(result)
    except ValueError as e:
        raise GraphBuildError(f'Concept source returned invalid hierarchy: {e}') from e


def _as_items(result: list[ConceptItem | dict] | None) -> list[ConceptItem]:
    try:
        return PrerequisiteList.model_validate({'prerequisites': result}).prerequisites
    except ValueError as e:
        raise GraphBuildError(f'Concept source returned invalid prerequisites: {e}') from e


class GraphBuilder:
    """
    Builds a concept graph from a nested hierarchy fetched in one request.

    `is_foundational` is kept as node metadata only: nested prerequisites of a
    foundational concept are still added to the graph.
    """

    def __init__(self, provider: ConceptHierarchyProvider):
        self._provider: ConceptHierarchyProvider = provider

    async def build(self, title: str, abstract: str = '') -> Graph:
        """
        Build a concept graph for the paper.

        Parameters
        ----------
        title : str
            Paper title, becomes the name of the target node
        abstract : str, default=''
            Paper abstract, may be empty

        Returns
        -------
        Graph
            Deduplicated graph rooted at the `target` node

        Raises
        ------
        GraphBuildError
            If the concept source fails, no partial graph is returned
        """
        title = _check_title(title)
        assembly = GraphAssembly(title)

        logger.info('Requesting concept hierarchy for %r', title)
        hierarchy = _as_hierarchy(
            await _from_source(self._provider.fetch_hierarchy(title, abstract or ''))
        )
        self._walk(assembly, hierarchy.concepts, TARGET_ID, depth=1)

        graph = assembly.snapshot()
        logger.info(
            'Built graph for %r: %d nodes, %d edges', title, len(graph.nodes), len(graph.edges)
        )
        return graph

    def _walk(
        self, assembly: GraphAssembly, items: list[ConceptItem], parent_id: str, depth: int
    ) -> None:
        for item in items:
            node, created = assembly.add_concept(item, parent_id, depth)
            # known concepts were expanded where they first appeared
            if created and item.prerequisites:
                self._walk(assembly, item.prerequisites, node.id, depth + 1)


class SequentialGraphBuilder:
    """
    Builds a concept graph asking the source for each concept separately.

    Concepts are expanded breadth-first from an explicit worklist, one request at
    a time. Expansion stops at foundational concepts and at `max_depth`.
    """

    def __init__(self, provider: PrerequisiteProvider, max_depth: int = 3):
        if max_depth < 1:
            raise ValueError('max_depth must be at least 1')
        self._provider: PrerequisiteProvider = provider
        self._max_depth: int = max_depth

    async def build(self, title: str, abstract: str = '') -> Graph:
        """Build a concept graph for the paper, see `GraphBuilder.build`"""
        title = _check_title(title)
        assembly = GraphAssembly(title)
        worklist: deque[ConceptNode] = deque()

        logger.info('Requesting requirements for %r', title)
        items = await _from_source(self._provider.fetch_requirements(title, abstract or ''))
        self._register(assembly, worklist, items, TARGET_ID, depth=1)

        requests = 1
        while worklist:
            node = worklist.popleft()
            logger.debug('Expanding %s (depth %d)', node.id, node.depth)
            items = await _from_source(
                self._provider.fetch_prerequisites(node.name, node.description)
            )
            requests += 1
            self._register(assembly, worklist, items, node.id, depth=node.depth + 1)

        graph = assembly.snapshot()
        logger.info(
            'Built graph for %r in %d requests: %d nodes, %d edges',
            title,
            requests,
            len(graph.nodes),
            len(graph.edges),
        )
        return graph

    def _register(
        self,
        assembly: GraphAssembly,
        worklist: deque[ConceptNode],
        items: list[ConceptItem],
        parent_id: str,
        depth: int,
    ) -> None:
        for item in _as_items(items):
            node, created = assembly.add_concept(item, parent_id, depth)
            if created and not node.is_foundational and depth < self._max_depth:
                worklist.append(node)
