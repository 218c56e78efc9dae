from typing import Any, Mapping, Optional


class MealLookupError(Exception):
    """Base class for failures while looking up a meal menu.

    Attributes:
        message: human-readable message
        details: optional mapping with extra context (status code, date, ...)
        code: optional machine-readable error code
    """

    default_code = "MEAL_LOOKUP_ERROR"

    def __init__(self, message: str = "Meal lookup failed", details: Optional[Mapping[str, Any]] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details
        self.code = code or self.default_code

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            payload["details"] = dict(self.details)
        return payload

    def __str__(self) -> str:
        return self.message


class MealValidationError(MealLookupError):
    """Raised when no date was selected before searching."""

    default_code = "VALIDATION_ERROR"


class MealDateError(MealLookupError):
    """Raised when a date cannot be read as a calendar date."""

    default_code = "INVALID_DATE"


class MealFetchError(MealLookupError):
    """Raised on a non-success HTTP status or a transport failure.

    ``details["status_code"]`` is set when the relay answered.
    """

    default_code = "NETWORK_ERROR"


class MealParseError(MealLookupError):
    """Raised when the meal service response is not well-formed XML."""

    default_code = "PARSE_ERROR"
