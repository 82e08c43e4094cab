"""Prompts for concept hierarchy extraction pipeline"""

import pathlib

from iso639 import Language
from jinja2 import Environment, FileSystemLoader, StrictUndefined
from openai.types.chat import ChatCompletionMessageParam
from pydantic import BaseModel

here = pathlib.Path(__file__).parent.resolve()
jinja_env = Environment(loader=FileSystemLoader(str(here)), undefined=StrictUndefined)


def _system_message(language: str) -> ChatCompletionMessageParam:
    system_template = jinja_env.get_template('system.md.jinja')
    language_name = Language.match(language).name
    return {'role': 'system', 'content': system_template.render(language=language_name)}


def hierarchy_prompt(
    *,
    title: str,
    abstract: str,
    language: str,
    response_model: type[BaseModel],
    max_concepts: int = 15,
    max_levels: int = 3,
) -> list[ChatCompletionMessageParam]:
    """Creates prompt for extracting the full nested concept hierarchy in one request."""
    user_template = jinja_env.get_template('hierarchy.md.jinja')
    return [
        _system_message(language),
        {
            'role': 'user',
            'content': user_template.render(
                title=title,
                abstract=abstract,
                max_concepts=max_concepts,
                max_levels=max_levels,
                json_schema=response_model.model_json_schema(),
            ),
        },
    ]


def requirements_prompt(
    *, title: str, abstract: str, language: str, response_model: type[BaseModel]
) -> list[ChatCompletionMessageParam]:
    """Creates prompt for direct prerequisites of a paper"""
    user_template = jinja_env.get_template('requirements.md.jinja')
    return [
        _system_message(language),
        {
            'role': 'user',
            'content': user_template.render(
                title=title, abstract=abstract, json_schema=response_model.model_json_schema()
            ),
        },
    ]


def prerequisites_prompt(
    *, name: str, description: str, language: str, response_model: type[BaseModel]
) -> list[ChatCompletionMessageParam]:
    """Creates prompt for direct prerequisites of a single concept"""
    user_template = jinja_env.get_template('prerequisites.md.jinja')
    return [
        _system_message(language),
        {
            'role': 'user',
            'content': user_template.render(
                name=name, description=description, json_schema=response_model.model_json_schema()
            ),
        },
    ]


__all__ = ['hierarchy_prompt', 'requirements_prompt', 'prerequisites_prompt']
