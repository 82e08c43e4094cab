import logging
from typing import TypeVar

from openai import AsyncOpenAI, OpenAIError
from openai.types.chat import ChatCompletionMessageParam
from pydantic import BaseModel, ValidationError

from prereq_graph.errors import ConceptSourceError
from prereq_graph.llm_pipelines.hierarchy.prompts import (
    hierarchy_prompt,
    prerequisites_prompt,
    requirements_prompt,
)
from prereq_graph.llm_pipelines.models import ConceptHierarchy, ConceptItem, PrerequisiteList

logger = logging.getLogger(__name__)

ResponseModel = TypeVar('ResponseModel', bound=BaseModel)


class ConceptHierarchyPipeline:
    """
    LLM pipeline reporting prerequisite concepts of a research paper.

    Supports two ways of asking:
    - the whole nested hierarchy in one request (`fetch_hierarchy`)
    - direct prerequisites of the paper, then of each concept, one request each
      (`fetch_requirements`, `fetch_prerequisites`)

    Any failure, including an answer that does not parse into the response model,
    is raised as `ConceptSourceError`. Nothing is retried.
    """

    def __init__(self, client: AsyncOpenAI, model: str, language: str = 'en'):
        self._client: AsyncOpenAI = client
        self._model: str = model
        self._language: str = language

    async def _parse(
        self, messages: list[ChatCompletionMessageParam], response_format: type[ResponseModel]
    ) -> ResponseModel:
        try:
            response = await self._client.chat.completions.parse(
                model=self._model,
                messages=messages,
                response_format=response_format,
                temperature=0.0,
                seed=42,
            )
        except (OpenAIError, ValidationError) as e:
            logger.warning('Concept request failed: %s', e)
            raise ConceptSourceError(f'Concept request failed: {e}') from e

        message = response.choices[0].message
        if message.parsed is None:
            reason = message.refusal or 'empty response'
            logger.warning('Concept request returned nothing usable: %s', reason)
            raise ConceptSourceError(f'Concept request returned nothing usable: {reason}')

        return message.parsed

    async def fetch_hierarchy(self, title: str, abstract: str) -> ConceptHierarchy:
        """
        Request the full nested prerequisite hierarchy for a paper.

        Parameters
        ----------
        title : str
            Paper title
        abstract : str
            Paper abstract, may be empty

        Returns
        -------
        ConceptHierarchy
            Top-level concepts with their prerequisites nested inside
        """
        messages = hierarchy_prompt(
            title=title,
            abstract=abstract,
            language=self._language,
            response_model=ConceptHierarchy,
        )
        hierarchy = await self._parse(messages, ConceptHierarchy)
        logger.info('Received hierarchy with %d top-level concepts', len(hierarchy.concepts))
        return hierarchy

    async def fetch_requirements(self, title: str, abstract: str) -> list[ConceptItem]:
        """Request direct prerequisites of a paper"""
        messages = requirements_prompt(
            title=title,
            abstract=abstract,
            language=self._language,
            response_model=ConceptHierarchy,
        )
        requirements = await self._parse(messages, ConceptHierarchy)
        return requirements.concepts

    async def fetch_prerequisites(self, name: str, description: str) -> list[ConceptItem]:
        """Request direct prerequisites of a single concept"""
        messages = prerequisites_prompt(
            name=name,
            description=description,
            language=self._language,
            response_model=PrerequisiteList,
        )
        prerequisites = await self._parse(messages, PrerequisiteList)
        return prerequisites.prerequisites
