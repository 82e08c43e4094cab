import logging
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from openai import AsyncOpenAI

from prereq_graph.errors import GraphBuildError
from prereq_graph.graph import (
    ConceptNode,
    Graph,
    GraphBuilder,
    GraphSummary,
    SequentialGraphBuilder,
    StudyPath,
    all_study_paths,
    shortest_study_path,
    summarize_graph,
    topological_study_order,
)
from prereq_graph.llm_pipelines import ConceptHierarchyPipeline
from prereq_graph.settings import settings

from .models import BuildGraphRequest, BuildGraphResponse

logging.basicConfig(
    level=settings.log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s'
)
logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_concept_pipeline() -> ConceptHierarchyPipeline:
    client = AsyncOpenAI(
        api_key=settings.openai_api_key.get_secret_value(),
        base_url=str(settings.openai_base_url),
        timeout=settings.request_timeout,
    )
    return ConceptHierarchyPipeline(
        client=client, model=settings.model_name, language=settings.language
    )


def get_graph_builder() -> GraphBuilder | SequentialGraphBuilder:
    pipeline = get_concept_pipeline()
    if settings.build_strategy == 'sequential':
        return SequentialGraphBuilder(pipeline, max_depth=settings.max_depth)
    return GraphBuilder(pipeline)


app = FastAPI(
    title='Prerequisite Graph API',
    description=(
        'Builds a prerequisite concept graph for a research paper and plans the study path:\n'
        '1) POST /graph/build — title + abstract ⇒ graph, shortest study path and study order.\n'
        '2) POST /graph/shortest-path, /graph/study-order, /graph/all-paths, /graph/summary — '
        'queries over an already built graph.'
    ),
    version='1.0.0',
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=False,
    allow_methods=['*'],
    allow_headers=['*'],
)


@app.post('/graph/build', response_model=BuildGraphResponse)
async def build_graph(
    request: BuildGraphRequest,
    builder: Annotated[GraphBuilder | SequentialGraphBuilder, Depends(get_graph_builder)],
):
    """Build concept graph for a paper and plan the study path over it"""
    try:
        graph = await builder.build(request.title, request.abstract)
    except GraphBuildError as e:
        logger.warning('Graph build failed for %r: %s', request.title, e)
        raise HTTPException(
            status_code=502, detail=f'Could not build concept graph: {e}'
        ) from e

    return BuildGraphResponse(
        graph=graph,
        shortest_path=shortest_study_path(graph),
        study_order=topological_study_order(graph),
        summary=summarize_graph(graph),
    )


@app.post('/graph/shortest-path', response_model=StudyPath)
async def graph_shortest_path(graph: Graph):
    """Cheapest study path from a starting concept to the target"""
    return shortest_study_path(graph)


@app.post('/graph/study-order', response_model=list[ConceptNode])
async def graph_study_order(graph: Graph):
    """All concepts, prerequisites first"""
    return topological_study_order(graph)


@app.post('/graph/all-paths', response_model=list[StudyPath])
async def graph_all_paths(graph: Graph):
    return all_study_paths(graph)


@app.post('/graph/summary', response_model=GraphSummary)
async def graph_summary(graph: Graph):
    return summarize_graph(graph)


@app.get('/', include_in_schema=False)
async def root():
    """Liveness check pointing at the interactive docs"""
    return {'ok': True, 'see': '/docs'}
