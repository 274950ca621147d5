class AgentError(Exception):
    pass


class QueryValidationError(AgentError):
    """The caller's query is missing or blank."""


class ConfigurationError(AgentError):
    """A required setting (the OpenAI API key) is not configured."""


class UpstreamError(AgentError):
    """The language model could not be reached or replied with something unusable."""


class WeatherFetchError(AgentError):
    """The weather provider could not be reached or returned an error."""


class SchemaError(AgentError):
    """The structured reply does not match the response schema."""
