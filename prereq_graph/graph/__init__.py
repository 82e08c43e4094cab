"""Concept graph assembly and study path queries"""

from .builder import GraphBuilder, SequentialGraphBuilder
from .models import ConceptNode, DependencyEdge, Graph, GraphSummary, StudyPath
from .paths import all_study_paths, shortest_study_path, summarize_graph, topological_study_order

__all__ = [
    'ConceptNode',
    'DependencyEdge',
    'Graph',
    'GraphBuilder',
    'GraphSummary',
    'SequentialGraphBuilder',
    'StudyPath',
    'all_study_paths',
    'shortest_study_path',
    'summarize_graph',
    'topological_study_order',
]
