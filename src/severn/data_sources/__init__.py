"""Data sources that seed a pipeline's initial context."""

from severn.data_sources.base import DataSource, StaticDataSource
from severn.data_sources.http import HttpDataSource, HttpDataSourceBuilder

__all__ = [
    "DataSource",
    "StaticDataSource",
    "HttpDataSource",
    "HttpDataSourceBuilder",
]
