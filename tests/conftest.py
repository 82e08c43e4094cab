import pytest

from prereq_graph.graph.models import ConceptNode, DependencyEdge, Graph


@pytest.fixture
def make_graph():
    """
    Build a graph by hand.

    `concepts` are `(id, study_hours, is_foundational)` tuples in node order after the
    target, `requires` are `(from_id, to_id)` pairs meaning "from requires to".
    """

    def _make(concepts, requires):
        nodes = [
            ConceptNode(
                id='target', name='Paper', kind='target', difficulty='research', study_hours=0
            )
        ]
        nodes += [
            ConceptNode(id=node_id, name=node_id, study_hours=hours, is_foundational=foundational, depth=1)
            for node_id, hours, foundational in concepts
        ]
        edges = [DependencyEdge(from_id=from_id, to_id=to_id) for from_id, to_id in requires]
        return Graph(nodes=nodes, edges=edges)

    return _make


def ids(nodes):
    return [node.id for node in nodes]


@pytest.fixture
def node_ids():
    return ids
