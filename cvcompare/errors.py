from enum import Enum

# Longest slice of a server body quoted back to the user.
MAX_DETAIL_CHARS = 200


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    SERVER_ERROR = "server_error"
    MALFORMED_RESPONSE = "malformed_response"
    TRANSPORT_ERROR = "transport_error"


class AnalysisError(Exception):
    """Base class for every failure of a single analysis attempt."""

    kind: ErrorKind = ErrorKind.TRANSPORT_ERROR

    @property
    def user_message(self) -> str:
        return str(self)


class MissingInputError(AnalysisError):
    """Raised when the résumé or the job description has not been provided."""

    kind = ErrorKind.VALIDATION

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required input: {field}")


class ServerError(AnalysisError):
    """The analysis endpoint answered with a non-2xx status."""

    kind = ErrorKind.SERVER_ERROR

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Analysis service error ({status_code})")

    @property
    def user_message(self) -> str:
        detail = self.body.strip()[:MAX_DETAIL_CHARS] or "no details"
        return f"Server error from the analysis service ({self.status_code}): {detail}"


class MalformedResponseError(AnalysisError):
    """A 2xx response whose body is not the expected ``{"result": str}`` JSON."""

    kind = ErrorKind.MALFORMED_RESPONSE

    def __init__(self, body: str):
        self.body = body
        super().__init__("Analysis service returned an invalid response")

    @property
    def user_message(self) -> str:
        return "The analysis service returned an invalid response."


class TransportError(AnalysisError):
    """The request could not be completed (connectivity, DNS, timeouts)."""

    kind = ErrorKind.TRANSPORT_ERROR

    @property
    def user_message(self) -> str:
        return f"Could not reach the analysis service: {self}"


class ListingFetchError(Exception):
    """Raised when a job listing cannot be imported from a URL."""
