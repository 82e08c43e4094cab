class GraphBuildError(Exception):
    """A concept graph could not be built; no partial graph is available."""


class ConceptSourceError(GraphBuildError):
    """The concept source failed or returned unusable structured data."""
