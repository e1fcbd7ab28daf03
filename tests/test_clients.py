"""Tests for the HTTP adapters, the tokenizer and telemetry."""
from __future__ import annotations

import json

import httpx
import pytest

from codeanswer.answer.errors import PassageDecodeError
from codeanswer.answer.models import QueryEvent
from codeanswer.config import Settings
from codeanswer.core import tokenizer as tokenizer_module
from codeanswer.core.telemetry import AnswerTelemetry
from codeanswer.infra.answer_api_client import AnswerApiClient
from codeanswer.infra.embedding_client import EmbeddingClient
from codeanswer.infra.file_index_client import FileIndexClient
from codeanswer.infra.qdrant_client import QdrantClient
from codeanswer.infra.semantic import SemanticSearch, build_filter
from codeanswer.query import parse_nl

_RealAsyncClient = httpx.AsyncClient


@pytest.fixture
def mock_http(monkeypatch):
    """Route every httpx.AsyncClient through a MockTransport handler."""

    requests: list[httpx.Request] = []

    def install(handler):
        def _handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        transport = httpx.MockTransport(_handler)

        def factory(*args, **kwargs):
            kwargs["transport"] = transport
            return _RealAsyncClient(*args, **kwargs)

        monkeypatch.setattr(httpx, "AsyncClient", factory)
        return requests

    return install


def _hit(path: str, score: float) -> dict[str, object]:
    return {
        "id": path,
        "score": score,
        "payload": {
            "lang": "go",
            "repo_name": "server",
            "repo_ref": "github.com/acme/server",
            "relative_path": path,
            "snippet": "func main() {}",
            "start_line": "1",
            "end_line": "2",
            "start_byte": "0",
            "end_byte": "14",
        },
    }


@pytest.mark.asyncio
async def test_answer_api_client_posts_prompt_and_returns_raw_text(mock_http):
    requests = mock_http(lambda request: httpx.Response(200, text=" 3\n"))
    client = AnswerApiClient("http://answer-api:8080/")
    reply = await client.complete("pick one", max_tokens=1)
    assert reply == " 3\n"
    assert str(requests[0].url) == "http://answer-api:8080/q"
    assert json.loads(requests[0].content) == {"prompt": "pick one", "max_tokens": 1}


@pytest.mark.asyncio
async def test_answer_api_client_raises_status_errors(mock_http):
    mock_http(lambda request: httpx.Response(503, text="busy"))
    with pytest.raises(httpx.HTTPStatusError) as excinfo:
        await AnswerApiClient("http://answer-api:8080").complete("p", max_tokens=5)
    assert excinfo.value.response.status_code == 503


@pytest.mark.asyncio
async def test_file_index_client_fetches_content(mock_http):
    requests = mock_http(lambda request: httpx.Response(200, json={"content": "print('hi')\n"}))
    content = await FileIndexClient("http://file-index:8002").get_file(
        "github.com/acme/server", "cmd/main.go"
    )
    assert content == "print('hi')\n"
    assert requests[0].url.params["repo_ref"] == "github.com/acme/server"
    assert requests[0].url.params["path"] == "cmd/main.go"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response",
    [httpx.Response(404, json={"error": "missing"}), httpx.Response(200, json={"text": "x"})],
)
async def test_file_index_client_failures(mock_http, response):
    mock_http(lambda request: response)
    with pytest.raises(RuntimeError):
        await FileIndexClient("http://file-index:8002").get_file("github.com/acme/server", "x.go")


def test_build_filter():
    assert build_filter(parse_nl("how")) is None
    assert build_filter(parse_nl("repo:server lang:go how")) == {
        "must": [
            {"key": "repo_name", "match": {"value": "server"}},
            {"key": "lang", "match": {"value": "go"}},
        ]
    }
    assert build_filter(parse_nl("repo:a repo:b how")) == {
        "must": [{"key": "repo_name", "match": {"any": ["a", "b"]}}]
    }


@pytest.mark.asyncio
async def test_semantic_search_embeds_target_and_decodes_hits(mock_http):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/embeddings":
            return httpx.Response(200, json={"embeddings": [[0.1, 0.2, 0.3]]})
        return httpx.Response(200, json={"result": [_hit("main.go", 0.8), _hit("util.go", 0.4)]})

    requests = mock_http(handler)
    search = SemanticSearch(
        EmbeddingClient("http://embedding-service:8001"),
        QdrantClient("http://qdrant:6333", api_key="secret"),
        collection="documents",
    )
    passages = await search.search(parse_nl("lang:go where is main"), 60)

    assert [p.relative_path for p in passages] == ["main.go", "util.go"]
    assert json.loads(requests[0].content) == {"texts": ["where is main"]}
    search_body = json.loads(requests[1].content)
    assert requests[1].url.path == "/collections/documents/points/search"
    assert requests[1].headers["api-key"] == "secret"
    assert search_body["limit"] == 60
    assert search_body["vector"] == [0.1, 0.2, 0.3]
    assert search_body["filter"] == {"must": [{"key": "lang", "match": {"value": "go"}}]}


@pytest.mark.asyncio
async def test_semantic_search_surfaces_malformed_hits(mock_http):
    broken = _hit("main.go", 0.8)
    del broken["payload"]["start_byte"]

    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/v1/embeddings":
            return httpx.Response(200, json={"embeddings": [[0.1]]})
        return httpx.Response(200, json={"result": [_hit("ok.go", 0.5), broken]})

    mock_http(handler)
    search = SemanticSearch(EmbeddingClient("http://e"), QdrantClient("http://q"))
    with pytest.raises(PassageDecodeError):
        await search.search(parse_nl("where is main"), 60)


@pytest.mark.asyncio
async def test_embedding_client_rejects_malformed_payload(mock_http):
    mock_http(lambda request: httpx.Response(200, json={"vectors": []}))
    with pytest.raises(RuntimeError):
        await EmbeddingClient("http://e").embed_texts(["q"])


def test_tokenizer_uses_named_encoding(monkeypatch):
    loaded = []

    class FakeEncoding:
        def encode(self, text, disallowed_special="all"):
            return text.split()

    def fake_get_encoding(name):
        loaded.append(name)
        return FakeEncoding()

    monkeypatch.setattr(tokenizer_module.tiktoken, "get_encoding", fake_get_encoding)
    tok = tokenizer_module.Tokenizer("gpt2")
    assert tok.count_tokens("fn main ( ) { }") == 6
    assert tok.count_tokens("<|endoftext|> inside a file") == 4
    assert loaded == ["gpt2"]


def _event() -> QueryEvent:
    return QueryEvent(
        user_id="u-1",
        query="where is main",
        select_prompt="select",
        relevant_snippet_index=2,
        explain_prompt="explain",
        explanation="it is in main.go",
    )


@pytest.mark.asyncio
async def test_telemetry_disabled_without_langfuse(mock_http):
    requests = mock_http(lambda request: httpx.Response(200))
    telemetry = AnswerTelemetry(Settings(langfuse_host=None))
    assert telemetry.enabled is False
    await telemetry.record_query(_event())
    assert requests == []


@pytest.mark.asyncio
async def test_telemetry_posts_event(mock_http):
    requests = mock_http(lambda request: httpx.Response(200, json={}))
    telemetry = AnswerTelemetry(
        Settings(langfuse_host="http://langfuse:3000/", langfuse_public_key="pk", langfuse_secret_key="sk")
    )
    await telemetry.record_query(_event())
    assert str(requests[0].url) == "http://langfuse:3000/api/public/ingestion/events"
    body = json.loads(requests[0].content)
    assert body["name"] == "answer_query"
    assert body["metadata"]["relevant_snippet_index"] == 2
    assert requests[0].headers["X-Langfuse-Public-Key"] == "pk"


@pytest.mark.asyncio
async def test_telemetry_swallows_failures(mock_http):
    mock_http(lambda request: httpx.Response(500))
    telemetry = AnswerTelemetry(
        Settings(langfuse_host="http://langfuse:3000", langfuse_public_key="pk", langfuse_secret_key="sk")
    )
    await telemetry.record_query(_event())
