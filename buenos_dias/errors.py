class PipelineError(Exception):
    """Base class for errors raised by the curation pipeline."""


class FetchError(PipelineError):
    """A sitemap or article page could not be fetched."""

    def __init__(self, url, status=None, message=None):
        self.url = url
        self.status = status
        if message is None:
            message = f"Request failed for {url} with status {status}" if status else f"Request failed for {url}"
        super().__init__(message)


class ParseError(PipelineError):
    """A sitemap, structured-data block or collaborator reply was malformed."""


class CollaboratorError(PipelineError):
    """The AI collaborator was unreachable or its reply failed validation."""


class ConfigurationError(PipelineError):
    """Required configuration is missing. Fatal, raised before any stage runs."""
