"""Domain-specific exceptions for the sales analytics core.

This module defines custom exceptions that are part of the public API.
All exceptions inherit from SalesAnalyticsError for easy catching.
"""


class SalesAnalyticsError(Exception):
    """Base exception for all sales analytics errors.

    Users can catch this exception to handle any error raised by the package.
    """

    pass


class ConfigError(SalesAnalyticsError):
    """Raised when there is a configuration error.

    This exception is raised when:
    - Invalid configuration values are provided
    - Environment overrides cannot be parsed
    """

    pass


class DataQualityError(SalesAnalyticsError):
    """Raised when the transaction input cannot be interpreted at all.

    Individual bad fields never raise; they are coerced and logged. This is
    reserved for input that is not a collection of records.
    """

    pass


class InvalidRequestError(SalesAnalyticsError, ValueError):
    """Raised when an analysis request names an unknown option.

    This exception is raised when:
    - The dimension, metric, period mode or quick filter is not recognized
    - A slice or page size is negative
    """

    pass


class DateParseFailure(SalesAnalyticsError, ValueError):
    """Raised when a payment date is not in a recognized format.

    This is a local, non-fatal condition: period pipelines catch it and
    exclude the transaction from date buckets only.
    """

    def __init__(self, value: object) -> None:
        super().__init__(f"Unrecognized payment date: {value!r}")
        self.value = value
