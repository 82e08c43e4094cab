from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from prereq_graph.graph.models import ConceptNode, Graph, GraphSummary, StudyPath


class BuildGraphRequest(BaseModel):
    title: str
    abstract: str = ''

    @field_validator('title')
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError('title must not be blank')
        return value.strip()


class BuildGraphResponse(BaseModel):
    """Built graph together with the study plan computed over it"""

    model_config = ConfigDict(  # pyright: ignore[reportUnannotatedClassAttribute]
        alias_generator=to_camel, populate_by_name=True
    )

    graph: Graph
    shortest_path: StudyPath
    study_order: list[ConceptNode]
    summary: GraphSummary
