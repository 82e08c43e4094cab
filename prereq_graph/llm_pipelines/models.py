from inspect import cleandoc
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def _items_only(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, (dict, ConceptItem))]


class ConceptItem(BaseModel):
    """
    A single prerequisite concept as reported by the concept source.

    Every field is loosely typed, malformed values are dropped to None here and
    the graph builder substitutes defaults for anything missing.
    """

    model_config = ConfigDict(  # pyright: ignore[reportUnannotatedClassAttribute]
        alias_generator=to_camel, populate_by_name=True
    )

    name: str | None = Field(default=None, description='Short unique name of the concept')
    difficulty: str | None = Field(
        default=None,
        description='One of: undergraduate, graduate, advanced, research',
    )
    description: str | None = Field(
        default=None, description='Brief description of why this concept is needed'
    )
    estimated_study_hours: float | str | None = Field(
        default=None, description='Estimated number of hours to study the concept'
    )
    is_foundational: bool | None = Field(
        default=None,
        description=cleandoc("""
            True if this is a basic concept that does not need further breakdown
            (basic algebra, calculus, programming, etc.)
        """),
    )
    prerequisites: list['ConceptItem'] | None = Field(
        default=None,
        description=cleandoc("""
            Concepts that must be known before this one.

            Makes the model recursive:
            - A concept may list its own prerequisites, forming one step of the hierarchy.
            - Or it may be foundational (base case), then prerequisites is an empty list or null.
        """),
    )

    @field_validator('name', 'difficulty', 'description', mode='before')
    @classmethod
    def _text_or_none(cls, value: Any) -> str | None:
        if isinstance(value, str):
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return None

    @field_validator('estimated_study_hours', mode='before')
    @classmethod
    def _hours_or_none(cls, value: Any) -> float | str | None:
        if isinstance(value, (int, float, str)) and not isinstance(value, bool):
            return value
        return None

    @field_validator('is_foundational', mode='before')
    @classmethod
    def _flag_or_none(cls, value: Any) -> bool | None:
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.strip().lower() in ('true', 'yes', '1')
        if isinstance(value, (int, float)):
            return bool(value)
        return None

    @field_validator('prerequisites', mode='before')
    @classmethod
    def _nested_items(cls, value: Any) -> list | None:
        return _items_only(value) if isinstance(value, list) else None


class ConceptHierarchy(BaseModel):
    """Prerequisite concepts of a research paper, possibly nested"""

    concepts: list[ConceptItem] = Field(
        description='Top-level prerequisite concepts needed to understand the paper'
    )

    @model_validator(mode='before')
    @classmethod
    def _tolerate_missing(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {**data, 'concepts': _items_only(data.get('concepts'))}
        return data


class PrerequisiteList(BaseModel):
    """Direct prerequisites of a single concept"""

    prerequisites: list[ConceptItem] = Field(
        description='Direct prerequisites of the concept, empty if it is foundational'
    )

    @model_validator(mode='before')
    @classmethod
    def _tolerate_missing(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {**data, 'prerequisites': _items_only(data.get('prerequisites'))}
        return data
