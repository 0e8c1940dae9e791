"""
Pipeline Error Taxonomy.

ConfigurationError is fatal and raised before any network activity.
NotFoundError aborts the current stage. UpstreamError and ParseError are
item-level: the affected repository, commit or contributor is skipped or
replaced by a sentinel and the stage completes with partial data.
"""


class PipelineError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(PipelineError):
    """Required credentials or settings are missing."""


class NotFoundError(PipelineError):
    """A company or organization does not exist."""


class CompanyNotFound(NotFoundError):
    """No company record for the requested identifier."""


class OrgNotFound(NotFoundError):
    """The data service reports no such organization."""


class UpstreamError(PipelineError):
    """A remote service call failed."""


class UpstreamUnavailable(UpstreamError):
    """Transient network or service failure."""


class ParseError(PipelineError):
    """Malformed input or response."""


class InvalidProfileURL(ParseError):
    """A company website URL does not name an organization."""
