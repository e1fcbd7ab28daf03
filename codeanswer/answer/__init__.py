"""Answer synthesis pipeline: dedup, rank, select, grow, explain, assemble."""
from .errors import (  # noqa: F401
    AnswerError,
    InternalError,
    NoResults,
    PassageDecodeError,
    QueryParseError,
    SelectionOutOfRange,
    SelectionParseError,
    UpstreamOverloaded,
    UserError,
)
from .models import AnswerResponse, Passage, QueryEvent, RepoRef  # noqa: F401
