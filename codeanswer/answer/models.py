"""Domain models for the answer pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

from .errors import PassageDecodeError

# payload key -> Passage field; the search payload stores text under "snippet"
_STRING_FIELDS = {
    "lang": "lang",
    "repo_name": "repo_name",
    "repo_ref": "repo_ref",
    "relative_path": "relative_path",
    "snippet": "text",
}
_OFFSET_FIELDS = ("start_line", "end_line", "start_byte", "end_byte")


class Passage(BaseModel):
    """A scored code excerpt with its location inside a repository file."""

    model_config = ConfigDict(frozen=True)

    lang: str
    repo_name: str
    repo_ref: str
    relative_path: str
    text: str
    start_line: int = Field(..., ge=0)
    end_line: int = Field(..., ge=0)
    start_byte: int = Field(..., ge=0)
    end_byte: int = Field(..., ge=0)
    score: float

    @staticmethod
    def _string(payload: Mapping[str, Any], key: str) -> str:
        if key not in payload:
            raise PassageDecodeError(f"search hit is missing '{key}'")
        value = payload[key]
        if not isinstance(value, str):
            raise PassageDecodeError(f"search hit field '{key}' is not a string")
        return value

    @staticmethod
    def _offset(payload: Mapping[str, Any], key: str) -> int:
        if key not in payload:
            raise PassageDecodeError(f"search hit is missing '{key}'")
        value = payload[key]
        if isinstance(value, bool):
            raise PassageDecodeError(f"search hit field '{key}' is not an offset")
        if isinstance(value, int):
            parsed = value
        elif isinstance(value, str) and value.isascii() and value.isdigit():
            parsed = int(value)
        else:
            raise PassageDecodeError(f"search hit field '{key}' is not an offset: {value!r}")
        if parsed < 0:
            raise PassageDecodeError(f"search hit field '{key}' is negative")
        return parsed

    @classmethod
    def from_point(cls, point: Mapping[str, Any]) -> "Passage":
        """Decode a Qdrant search hit, rejecting partial records."""

        payload = point.get("payload")
        if not isinstance(payload, Mapping):
            raise PassageDecodeError("search hit carries no payload")
        score = point.get("score")
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            raise PassageDecodeError("search hit carries no score")

        fields: dict[str, Any] = {
            field: cls._string(payload, key) for key, field in _STRING_FIELDS.items()
        }
        for key in _OFFSET_FIELDS:
            fields[key] = cls._offset(payload, key)
        fields["score"] = float(score)
        return cls(**fields)


@dataclass(slots=True, frozen=True)
class RepoRef:
    """Parsed repository reference, e.g. ``github.com/org/repo``."""

    backend: str
    name: str

    @classmethod
    def parse(cls, value: str) -> "RepoRef":
        backend, sep, name = value.partition("/")
        if not sep or not backend or not name:
            raise ValueError(f"invalid repo reference: {value!r}")
        return cls(backend=backend, name=name)

    def __str__(self) -> str:
        return f"{self.backend}/{self.name}"


@dataclass(slots=True)
class QueryEvent:
    user_id: str
    query: str
    select_prompt: str
    relevant_snippet_index: int
    explain_prompt: str
    explanation: str


class Selection(BaseModel):
    index: int = 0
    answer: str
    id: str


class AnswerResponse(BaseModel):
    kind: Literal["answer"] = "answer"
    snippets: List[Passage]
    selection: Selection
