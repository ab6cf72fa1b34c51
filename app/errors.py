class ComparisonError(Exception):
    """Base class for failures that end a search attempt."""

    status_code = 500
    public_message = "Internal server error"


class MissingField(ComparisonError):
    status_code = 400
    public_message = "Missing required fields"


class UpstreamUnavailable(ComparisonError):
    """The LLM or exchange-rate endpoint was unreachable, unconfigured or returned non-2xx."""


class MalformedResponse(ComparisonError):
    """Model output could not be turned into a list of products."""
