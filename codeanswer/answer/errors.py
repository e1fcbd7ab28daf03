"""Error kinds surfaced by the answer pipeline."""
from __future__ import annotations


class AnswerError(Exception):
    """Base class for failures reported to the transport layer."""

    kind = "internal"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_detail(self) -> dict[str, str]:
        return {"kind": self.kind, "message": self.message}


class UserError(AnswerError):
    """Client-side fault: unparsable query or missing search target."""

    kind = "user"
    status_code = 400


class QueryParseError(UserError):
    pass


class UpstreamOverloaded(AnswerError):
    """The completion service answered with an overload status."""

    kind = "upstream_service"
    status_code = 503

    def __init__(self, message: str = "service is currently overloaded") -> None:
        super().__init__(message)


class InternalError(AnswerError):
    kind = "internal"
    status_code = 500


class NoResults(InternalError):
    def __init__(self, message: str = "semantic search returned no snippets") -> None:
        super().__init__(message)


class PassageDecodeError(InternalError):
    """A search hit did not carry the metadata every passage needs."""


class SelectionParseError(InternalError):
    pass


class SelectionOutOfRange(InternalError):
    def __init__(self, index: int, count: int) -> None:
        super().__init__("answer-api returned out-of-bounds index")
        self.index = index
        self.count = count
