"""Shared test fixtures."""

import pytest

from severn import DataSource, PromptModel, StaticAgent
from severn.errors import BackendError, DataSourceNoMatch


class EchoBackend(PromptModel):
    """Replies with "<agent-name>:<context>" and records every call."""

    def __init__(self, fail_on: int | None = None):
        self.calls: list[tuple[str, str, str]] = []
        self._fail_on = fail_on

    async def prompt(self, prompt, context, agent):
        self.calls.append((prompt, context, agent.name()))
        if self._fail_on is not None and len(self.calls) == self._fail_on:
            raise BackendError(f"backend failed on call {len(self.calls)}")
        return f"{agent.name()}:{context}"


class CountingDataSource(DataSource):
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    async def retrieve_data(self):
        self.calls += 1
        if self.error is not None:
            raise self.error
        if not self.text:
            raise DataSourceNoMatch()
        return self.text


@pytest.fixture
def backend():
    return EchoBackend()


@pytest.fixture
def writer():
    return StaticAgent("writer", "write concisely")


@pytest.fixture
def reviewer():
    return StaticAgent("reviewer", "review harshly")
