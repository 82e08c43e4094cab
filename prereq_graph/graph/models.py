from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

TARGET_ID = 'target'


class Difficulty(StrEnum):
    undergraduate = 'undergraduate'
    graduate = 'graduate'
    advanced = 'advanced'
    research = 'research'


class _GraphModel(BaseModel):
    model_config = ConfigDict(  # pyright: ignore[reportUnannotatedClassAttribute]
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class ConceptNode(_GraphModel):
    """
    A single node of the concept graph.

    Either the synthetic target (the paper being studied towards) or a
    prerequisite concept reported by the concept source.
    """

    id: str
    name: str
    kind: Literal['target', 'concept'] = 'concept'
    difficulty: Difficulty = Difficulty.undergraduate
    description: str = ''
    study_hours: float = Field(default=10, ge=0)
    depth: int = Field(default=0, ge=0)
    is_foundational: bool = False


class DependencyEdge(_GraphModel):
    """`from_id` requires `to_id`, i.e. `to_id` has to be studied first."""

    from_id: str = Field(alias='from')
    to_id: str = Field(alias='to')
    kind: Literal['requires'] = 'requires'


class Graph(_GraphModel):
    """Concept graph snapshot, nodes and edges in insertion order."""

    nodes: list[ConceptNode] = Field(default_factory=list)
    edges: list[DependencyEdge] = Field(default_factory=list)


class StudyPath(_GraphModel):
    """Ordered study sequence ending at the target, with its total cost."""

    path: list[ConceptNode] = Field(default_factory=list)
    total_hours: float = 0


class GraphSummary(_GraphModel):
    concept_count: int
    edge_count: int
    foundational_count: int
    total_hours: float
    max_depth: int
