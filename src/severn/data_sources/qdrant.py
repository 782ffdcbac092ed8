"""Vector retrieval against a Qdrant collection."""

from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING

from qdrant_client import AsyncQdrantClient, models
from qdrant_client.http.exceptions import ResponseHandlingException, UnexpectedResponse

from severn.config import QdrantConfig
from severn.data_sources.base import DataSource
from severn.errors import BackendError, DataSourceNoMatch, OptionIsNone, SerializationError

if TYPE_CHECKING:
    from severn.files import File
    from severn.models.base import EmbedModel

logger = logging.getLogger(__name__)

QDRANT_ERRORS = (UnexpectedResponse, ResponseHandlingException)


class QdrantDataSource(DataSource):
    """Data source returning the closest stored document to a query.

    The query is embedded with ``embedder`` and the best-scoring point's
    document payload becomes the pipeline's initial context.

    Example:
        source = QdrantDataSource(
            AsyncQdrantClient(url="http://localhost:6333"),
            OpenAIEmbedder(BackendConfig.from_env()),
            query="How do I rotate credentials?",
        )
        await source.embed_and_upsert(MarkdownFile.from_filepath("runbook.md"))
        pipeline = Pipeline().add_data_source(source).add_agent(Researcher())
    """

    def __init__(
        self,
        client: AsyncQdrantClient,
        embedder: EmbedModel,
        query: str,
        config: QdrantConfig | None = None,
    ):
        self.client = client
        self.embedder = embedder
        self.query = query
        self.config = config or QdrantConfig()

    def with_query(self, query: str) -> QdrantDataSource:
        """Return a copy bound to another query, sharing the same clients."""
        return QdrantDataSource(self.client, self.embedder, query, self.config)

    async def ensure_collection(self) -> None:
        """Create the collection if it does not exist yet."""
        name = self.config.collection_name
        try:
            if await self.client.collection_exists(name):
                return
            await self.client.create_collection(
                collection_name=name,
                vectors_config=models.VectorParams(
                    size=self.config.vector_size,
                    distance=models.Distance.COSINE,
                ),
            )
        except QDRANT_ERRORS as e:
            raise BackendError(f"Failed to create collection '{name}': {e}", cause=e) from e
        logger.info(f"Created Qdrant collection '{name}'")

    async def search_embeddings(self, embedding: list[float]) -> models.ScoredPoint:
        """Return the best-scoring point for an embedding.

        Raises:
            DataSourceNoMatch: If the collection returned no points.
            BackendError: If the search request failed.
        """
        try:
            response = await self.client.query_points(
                collection_name=self.config.collection_name,
                query=embedding,
                limit=self.config.limit,
                with_payload=True,
            )
        except QDRANT_ERRORS as e:
            logger.warning(f"An error occurred while searching for points: {e}")
            raise BackendError(f"Qdrant search failed: {e}", cause=e) from e

        if not response.points:
            raise DataSourceNoMatch(
                f"No points in '{self.config.collection_name}' matched the query"
            )
        return response.points[0]

    async def retrieve_data(self) -> str:
        embedding = await self.embedder.embed_sentence(self.query)
        point = await self.search_embeddings(embedding)

        payload = point.payload or {}
        if self.config.payload_field not in payload:
            raise OptionIsNone(
                f"Point {point.id} has no '{self.config.payload_field}' payload field"
            )

        value = payload[self.config.payload_field]
        if value in (None, "", {}, []):
            raise DataSourceNoMatch(f"Point {point.id} holds an empty document")
        if isinstance(value, str):
            document = value
        else:
            try:
                document = json.dumps(value)
            except (TypeError, ValueError) as e:
                raise SerializationError(f"Could not encode payload of point {point.id}: {e}") from e

        logger.debug(f"Retrieved point {point.id} (score={point.score:.3f})")
        return document

    async def upsert_embedding(self, embedding: list[float], document: str) -> str:
        """Store one embedding with its document payload.

        Returns:
            The id of the new point.
        """
        point_id = str(uuid.uuid4())
        point = models.PointStruct(
            id=point_id,
            vector=embedding,
            payload={self.config.payload_field: document},
        )
        try:
            await self.client.upsert(
                collection_name=self.config.collection_name,
                points=[point],
            )
        except QDRANT_ERRORS as e:
            raise BackendError(f"Qdrant upsert failed: {e}", cause=e) from e
        return point_id

    async def embed_and_upsert(self, file: File) -> list[str]:
        """Embed every passage of a file and store one point per passage.

        Returns:
            Ids of the stored points, in passage order.
        """
        chunks = file.parse()
        if not chunks:
            logger.warning(f"No passages to embed in {file.source or 'file'}")
            return []

        embeddings = await self.embedder.embed_file(chunks)
        if len(embeddings) != len(chunks):
            raise OptionIsNone(
                f"Expected {len(chunks)} embeddings but received {len(embeddings)}"
            )

        ids = []
        for chunk, embedding in zip(chunks, embeddings):
            ids.append(await self.upsert_embedding(embedding, chunk))

        logger.info(
            f"Upserted {len(ids)} passages into '{self.config.collection_name}'"
        )
        return ids
