from prereq_graph.graph.models import ConceptNode, DependencyEdge, Graph
from prereq_graph.graph.paths import (
    all_study_paths,
    shortest_study_path,
    summarize_graph,
    topological_study_order,
)


def test_path_cost_is_sum_of_node_hours(make_graph, node_ids):
    graph = make_graph([('A', 5, True), ('B', 10, False)], [('B', 'A'), ('target', 'B')])

    result = shortest_study_path(graph)

    assert node_ids(result.path) == ['A', 'B', 'target']
    assert result.total_hours == 15


def test_target_only_graph_has_no_path(make_graph):
    result = shortest_study_path(make_graph([], []))

    assert result.path == []
    assert result.total_hours == 0


def test_graph_without_target_has_no_path():
    graph = Graph(nodes=[ConceptNode(id='a-1', name='A', is_foundational=True)])

    assert shortest_study_path(graph).path == []
    assert all_study_paths(graph) == []


def test_candidates_without_route_are_skipped(make_graph):
    graph = make_graph([('A', 5, True), ('B', 1, False)], [('target', 'B')])

    # B has no prerequisites and is a candidate itself
    assert [n.id for n in shortest_study_path(graph).path] == ['B', 'target']

    isolated = make_graph([('A', 5, True)], [])
    assert shortest_study_path(isolated).path == []


def test_strictly_cheaper_candidate_wins(make_graph, node_ids):
    graph = make_graph(
        [('F1', 3, True), ('F2', 1, True), ('M', 1, False)],
        [('target', 'F1'), ('target', 'M'), ('M', 'F2')],
    )

    result = shortest_study_path(graph)

    assert node_ids(result.path) == ['F2', 'M', 'target']
    assert result.total_hours == 2


def test_exact_tie_goes_to_first_candidate(make_graph, node_ids):
    requires = [('target', 'F1'), ('target', 'M'), ('M', 'F2')]

    first = make_graph([('F1', 2, True), ('F2', 1, True), ('M', 1, False)], requires)
    result = shortest_study_path(first)
    assert node_ids(result.path) == ['F1', 'target']
    assert result.total_hours == 2

    reordered = make_graph([('F2', 1, True), ('M', 1, False), ('F1', 2, True)], requires)
    result = shortest_study_path(reordered)
    assert node_ids(result.path) == ['F2', 'M', 'target']
    assert result.total_hours == 2


def test_cheaper_branch_is_chosen_from_single_start(make_graph, node_ids):
    graph = make_graph(
        [('S', 1, True), ('P', 10, False), ('Q', 2, False)],
        [('P', 'S'), ('Q', 'S'), ('target', 'P'), ('target', 'Q')],
    )

    result = shortest_study_path(graph)

    assert node_ids(result.path) == ['S', 'Q', 'target']
    assert result.total_hours == 3


def test_foundational_concept_with_prerequisites_is_a_start(make_graph, node_ids):
    graph = make_graph([('Z', 5, False), ('F', 1, True)], [('F', 'Z'), ('target', 'F')])

    result = shortest_study_path(graph)

    assert node_ids(result.path) == ['F', 'target']
    assert result.total_hours == 1


def test_zero_hour_concepts_cost_nothing(make_graph, node_ids):
    graph = make_graph([('B', 1, True), ('A', 0, True)], [('target', 'B'), ('target', 'A')])

    result = shortest_study_path(graph)

    assert node_ids(result.path) == ['A', 'target']
    assert result.total_hours == 0


def test_unknown_and_duplicate_edges_are_ignored(make_graph, node_ids):
    graph = make_graph(
        [('A', 2, True)],
        [('target', 'A'), ('target', 'A'), ('target', 'ghost'), ('ghost', 'A')],
    )

    assert node_ids(shortest_study_path(graph).path) == ['A', 'target']
    assert node_ids(topological_study_order(graph)) == ['A', 'target']


def test_topological_order_respects_dependencies(make_graph):
    graph = make_graph(
        [('S', 1, True), ('P', 10, False), ('Q', 2, False), ('R', 4, True)],
        [('P', 'S'), ('Q', 'S'), ('Q', 'R'), ('target', 'P'), ('target', 'Q')],
    )

    order = topological_study_order(graph)
    position = {node.id: i for i, node in enumerate(order)}

    assert len(order) == len(graph.nodes)
    for edge in graph.edges:
        assert position[edge.to_id] < position[edge.from_id]


def test_topological_order_is_fifo(make_graph, node_ids):
    graph = make_graph(
        [('S', 1, True), ('R', 4, True), ('P', 10, False), ('Q', 2, False)],
        [('P', 'S'), ('Q', 'R'), ('target', 'P'), ('target', 'Q')],
    )

    assert node_ids(topological_study_order(graph)) == ['S', 'R', 'P', 'Q', 'target']


def test_cycle_is_tolerated(make_graph, node_ids):
    graph = make_graph(
        [('X', 3, False), ('Y', 4, False), ('F', 1, True)],
        [('X', 'Y'), ('Y', 'X'), ('target', 'X')],
    )

    assert node_ids(topological_study_order(graph)) == ['F']
    result = shortest_study_path(graph)
    assert result.path == []
    assert result.total_hours == 0
    assert all_study_paths(graph) == []


def test_cycle_with_entry_still_has_path(make_graph, node_ids):
    graph = make_graph(
        [('F', 1, True), ('X', 2, False), ('Y', 3, False)],
        [('X', 'F'), ('Y', 'X'), ('X', 'Y'), ('target', 'Y')],
    )

    result = shortest_study_path(graph)
    assert node_ids(result.path) == ['F', 'X', 'Y', 'target']
    assert result.total_hours == 6

    paths = all_study_paths(graph)
    assert [node_ids(p.path) for p in paths] == [['F', 'X', 'Y', 'target']]


def test_all_study_paths_enumerates_every_route(make_graph, node_ids):
    graph = make_graph(
        [('S', 1, True), ('P', 10, False), ('Q', 2, False), ('T', 1, True)],
        [('P', 'S'), ('Q', 'S'), ('target', 'P'), ('target', 'Q'), ('target', 'T')],
    )

    paths = all_study_paths(graph)

    assert [(node_ids(p.path), p.total_hours) for p in paths] == [
        (['S', 'P', 'target'], 11),
        (['S', 'Q', 'target'], 3),
        (['T', 'target'], 1),
    ]


def test_long_prerequisite_chain(make_graph, node_ids):
    names = [f'C{i}' for i in range(1500)]
    graph = make_graph(
        [(name, 1, False) for name in names],
        [('target', names[0]), *zip(names, names[1:])],
    )

    paths = all_study_paths(graph)

    assert len(paths) == 1
    assert node_ids(paths[0].path) == [*reversed(names), 'target']
    assert paths[0].total_hours == 1500
    assert len(shortest_study_path(graph).path) == 1501
    assert len(topological_study_order(graph)) == 1501


def test_summarize_graph(make_graph):
    graph = make_graph(
        [('A', 5, True), ('B', 10, False)],
        [('B', 'A'), ('target', 'B')],
    )
    graph = graph.model_copy(
        update={
            'nodes': [
                *graph.nodes[:2],
                graph.nodes[2].model_copy(update={'depth': 2}),
            ]
        }
    )

    summary = summarize_graph(graph)

    assert summary.concept_count == 2
    assert summary.edge_count == 2
    assert summary.foundational_count == 1
    assert summary.total_hours == 15
    assert summary.max_depth == 2


def test_graph_accepts_wire_format(node_ids):
    graph = Graph.model_validate(
        {
            'nodes': [
                {'id': 'target', 'name': 'Paper', 'kind': 'target', 'studyHours': 0},
                {'id': 'a-1', 'name': 'A', 'studyHours': 4, 'isFoundational': True, 'depth': 1},
            ],
            'edges': [{'from': 'target', 'to': 'a-1', 'kind': 'requires'}],
        }
    )

    assert graph.edges == [DependencyEdge(from_id='target', to_id='a-1')]
    assert node_ids(shortest_study_path(graph).path) == ['a-1', 'target']
