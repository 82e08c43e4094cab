"""LLM pipelines for prerequisite concept extraction"""

from .hierarchy.pipeline import ConceptHierarchyPipeline

__all__ = ['ConceptHierarchyPipeline']
