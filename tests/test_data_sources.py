"""Tests for data sources."""

import json
from types import SimpleNamespace

import httpx
import pytest
from qdrant_client import models as qdrant_models
from qdrant_client.http.exceptions import ResponseHandlingException

from severn import QdrantConfig, StaticDataSource
from severn.data_sources import HttpDataSourceBuilder
from severn.data_sources.qdrant import QdrantDataSource
from severn.errors import BackendError, DataSourceNoMatch, OptionIsNone, SerializationError
from severn.files import ParagraphTextSplitter
from severn.models.base import EmbedModel


@pytest.mark.asyncio
async def test_static_data_source():
    assert await StaticDataSource("doc").retrieve_data() == "doc"
    with pytest.raises(DataSourceNoMatch):
        await StaticDataSource("").retrieve_data()


# HTTP


def test_http_builder_requires_url():
    with pytest.raises(ValueError, match="URL"):
        HttpDataSourceBuilder().build()


def test_http_builder_rejects_get_with_body():
    with pytest.raises(ValueError, match="GET"):
        HttpDataSourceBuilder().url("https://api.test/x").body({"q": 1}).build()


def test_http_builder_rejects_post_without_body():
    with pytest.raises(ValueError, match="POST"):
        HttpDataSourceBuilder().url("https://api.test/x").request_method("POST").build()


def test_http_builder_rejects_unknown_method():
    with pytest.raises(ValueError):
        HttpDataSourceBuilder().request_method("DELETE")


def _http_source(handler, method="GET", body=None):
    builder = (
        HttpDataSourceBuilder()
        .url("https://api.test/search")
        .request_method(method)
        .header("X-Api-Key", "secret")
        .transport(httpx.MockTransport(handler))
    )
    if body is not None:
        builder = builder.body(body)
    return builder.build()


@pytest.mark.asyncio
async def test_http_get_returns_pretty_json():
    def handler(request):
        assert request.method == "GET"
        assert request.headers["X-Api-Key"] == "secret"
        return httpx.Response(200, json={"answer": 42})

    text = await _http_source(handler).retrieve_data()
    assert text == json.dumps({"answer": 42}, indent=2)


@pytest.mark.asyncio
async def test_http_post_sends_body():
    def handler(request):
        assert request.method == "POST"
        assert json.loads(request.content) == {"query": "release notes"}
        return httpx.Response(200, json=["note"])

    source = _http_source(handler, method="POST", body={"query": "release notes"})
    assert json.loads(await source.retrieve_data()) == ["note"]


@pytest.mark.parametrize("payload", [b"null", b"{}", b"[]"])
@pytest.mark.asyncio
async def test_http_empty_response_is_no_match(payload):
    source = _http_source(lambda request: httpx.Response(200, content=payload))
    with pytest.raises(DataSourceNoMatch):
        await source.retrieve_data()


@pytest.mark.asyncio
async def test_http_status_error_is_backend_error():
    source = _http_source(lambda request: httpx.Response(503))
    with pytest.raises(BackendError) as exc_info:
        await source.retrieve_data()
    assert isinstance(exc_info.value.cause, httpx.HTTPStatusError)


@pytest.mark.asyncio
async def test_http_transport_error_is_backend_error():
    def handler(request):
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(BackendError):
        await _http_source(handler).retrieve_data()


@pytest.mark.asyncio
async def test_http_non_json_is_serialization_error():
    source = _http_source(lambda request: httpx.Response(200, text="<html>"))
    with pytest.raises(SerializationError):
        await source.retrieve_data()


# Qdrant


class FakeEmbedder(EmbedModel):
    def __init__(self):
        self.sentences = []

    async def embed_sentence(self, text):
        self.sentences.append(text)
        return [float(len(text)), 1.0]

    async def embed_file(self, chunks):
        return [[float(i), 0.0] for i, _ in enumerate(chunks)]


class FakeQdrant:
    def __init__(self, points=(), error=None):
        self.points = list(points)
        self.error = error
        self.queries = []
        self.upserts = []
        self.collections = {}

    async def query_points(self, collection_name, query, limit, with_payload):
        self.queries.append((collection_name, query, limit, with_payload))
        if self.error is not None:
            raise self.error
        return SimpleNamespace(points=self.points)

    async def upsert(self, collection_name, points):
        self.upserts.append((collection_name, points))

    async def collection_exists(self, collection_name):
        return collection_name in self.collections

    async def create_collection(self, collection_name, vectors_config):
        self.collections[collection_name] = vectors_config


def _point(payload):
    return SimpleNamespace(id="p1", score=0.91, payload=payload)


@pytest.mark.asyncio
async def test_qdrant_embeds_query_before_search():
    client = FakeQdrant([_point({"document": "stored text"})])
    embedder = FakeEmbedder()
    source = QdrantDataSource(client, embedder, "what is stored?")

    assert await source.retrieve_data() == "stored text"
    assert embedder.sentences == ["what is stored?"]
    assert client.queries == [("severn", [15.0, 1.0], 1, True)]


@pytest.mark.asyncio
async def test_qdrant_with_query_and_config():
    client = FakeQdrant([_point({"body": {"title": "t"}})])
    config = QdrantConfig(collection_name="docs", payload_field="body", limit=3)
    source = QdrantDataSource(client, FakeEmbedder(), "first", config).with_query("second")

    assert source.query == "second"
    assert json.loads(await source.retrieve_data()) == {"title": "t"}
    assert client.queries[0][0] == "docs"
    assert client.queries[0][2] == 3


@pytest.mark.asyncio
async def test_qdrant_no_points_is_no_match():
    source = QdrantDataSource(FakeQdrant([]), FakeEmbedder(), "q")
    with pytest.raises(DataSourceNoMatch):
        await source.retrieve_data()


@pytest.mark.asyncio
@pytest.mark.parametrize("value", [None, "", {}, []])
async def test_qdrant_empty_payload_is_no_match(value):
    source = QdrantDataSource(FakeQdrant([_point({"document": value})]), FakeEmbedder(), "q")
    with pytest.raises(DataSourceNoMatch):
        await source.retrieve_data()


@pytest.mark.asyncio
async def test_qdrant_missing_payload_field():
    source = QdrantDataSource(FakeQdrant([_point({"other": "x"})]), FakeEmbedder(), "q")
    with pytest.raises(OptionIsNone):
        await source.retrieve_data()


@pytest.mark.asyncio
async def test_qdrant_empty_document_is_no_match():
    source = QdrantDataSource(FakeQdrant([_point({"document": ""})]), FakeEmbedder(), "q")
    with pytest.raises(DataSourceNoMatch):
        await source.retrieve_data()


@pytest.mark.asyncio
async def test_qdrant_client_error_is_backend_error():
    error = ResponseHandlingException(ConnectionError("refused"))
    source = QdrantDataSource(FakeQdrant(error=error), FakeEmbedder(), "q")

    with pytest.raises(BackendError) as exc_info:
        await source.retrieve_data()
    assert exc_info.value.cause is error


@pytest.mark.asyncio
async def test_qdrant_embed_and_upsert_stores_each_passage():
    client = FakeQdrant()
    source = QdrantDataSource(client, FakeEmbedder(), "q")
    file = ParagraphTextSplitter("first paragraph\n\nsecond paragraph\n")

    ids = await source.embed_and_upsert(file)

    assert len(ids) == 2
    assert len(set(ids)) == 2
    stored = [points[0] for _, points in client.upserts]
    assert [p.payload for p in stored] == [
        {"document": "first paragraph"},
        {"document": "second paragraph"},
    ]
    assert [p.vector for p in stored] == [[0.0, 0.0], [1.0, 0.0]]
    assert [str(p.id) for p in stored] == ids


@pytest.mark.asyncio
async def test_qdrant_embed_and_upsert_empty_file():
    client = FakeQdrant()
    source = QdrantDataSource(client, FakeEmbedder(), "q")

    assert await source.embed_and_upsert(ParagraphTextSplitter("\n\n")) == []
    assert client.upserts == []


@pytest.mark.asyncio
async def test_qdrant_ensure_collection_creates_once():
    client = FakeQdrant()
    source = QdrantDataSource(client, FakeEmbedder(), "q", QdrantConfig(vector_size=2))

    await source.ensure_collection()
    created = client.collections["severn"]
    await source.ensure_collection()

    assert client.collections == {"severn": created}
    assert created.size == 2
    assert created.distance == qdrant_models.Distance.COSINE
