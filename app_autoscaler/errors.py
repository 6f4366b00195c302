class AutoscalerError(Exception):
    """Base class for failures that stop the autoscaler."""


class ConfigurationError(AutoscalerError):
    """A required setting is missing or malformed, or startup could not complete."""


class QueryError(AutoscalerError):
    """The metric could not be read from Prometheus or is not trustworthy."""


class FetchError(AutoscalerError):
    """The app could not be retrieved or has no services."""


class UpdateError(AutoscalerError):
    """The app spec update was rejected or could not be sent."""
