"""Domain-specific exceptions: framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class SubmissionInProgressError(Exception):
    """Raised when a create is submitted while another one is still outstanding."""

    def __init__(self) -> None:
        super().__init__("A save is already in progress. Please wait for it to finish.")


class GatewayError(Exception):
    """Base class for failures talking to the spreadsheet backend."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class TransportError(GatewayError):
    """The endpoint was unreachable or answered with a non-success status."""


class FetchError(TransportError):
    """Reading the spreadsheet export failed at the transport level."""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class NetworkError(TransportError):
    """Submitting a mutation to the script endpoint failed at the transport level."""


class RemoteError(GatewayError):
    """The script endpoint was reached but reported an application-level failure."""


class ParseError(GatewayError):
    """A response body was not in the expected shape."""
