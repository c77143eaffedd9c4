"""Failure kinds the pipeline contains to a single item."""


class PipelineError(Exception):
    pass


class SourceUnavailable(PipelineError):
    """A signal source failed or timed out; the run continues without it."""


class GenerationFailure(PipelineError):
    """Generated content for one trend was missing, malformed, or unparseable."""


class PersistenceUnavailable(PipelineError):
    """The requested storage backend is not configured."""
