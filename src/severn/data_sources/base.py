"""Data source base class."""

from __future__ import annotations

from abc import ABC, abstractmethod

from severn.errors import DataSourceNoMatch


class DataSource(ABC):
    """Base class for retrieval steps that seed a pipeline's context.

    Implementations must:
    1. Perform a fresh retrieval on every call (no caching is assumed)
    2. Raise ``BackendError`` when the underlying service fails
    3. Raise ``DataSourceNoMatch`` instead of returning empty text

    Example:
        class Clipboard(DataSource):
            async def retrieve_data(self) -> str:
                return read_clipboard()
    """

    @abstractmethod
    async def retrieve_data(self) -> str:
        """Retrieve one blob of context text.

        Returns:
            Non-empty text for the first agent to read.

        Raises:
            DataSourceNoMatch: If the retrieval produced nothing usable.
            BackendError: If the underlying service failed.
        """
        pass


class StaticDataSource(DataSource):
    """Data source returning fixed text, e.g. a document already in memory."""

    def __init__(self, text: str):
        self.text = text

    async def retrieve_data(self) -> str:
        if not self.text:
            raise DataSourceNoMatch("Static data source holds no text")
        return self.text

    def __repr__(self) -> str:
        return f"StaticDataSource(text={self.text[:40]!r})"
