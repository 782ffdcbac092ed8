"""Ready-made agents for common research and writing pipelines."""

from __future__ import annotations

from jinja2 import Template

from severn.agents.base import Agent

RESEARCHER_PROMPT = """You are an AI agent.

Your job is to research whatever query the user gives you, with the provided context.

When answering, your summary should be concise."""

ARTICLE_WRITER_PROMPT = Template(
    """You are an AI agent.

Your job is to write an article that involves the data (or summary) that you've been given. \
Your target audience is {{ target_audience }}.

When answering, your tone should be: {{ tone }}."""
)


class Researcher(Agent):
    """Researches the user's query against the provided context."""

    def name(self) -> str:
        return "Researcher"

    def system_message(self) -> str:
        return RESEARCHER_PROMPT


class ArticleWriter(Agent):
    """Writes an article from the context it is given.

    Example:
        writer = ArticleWriter().with_target_audience("data engineers").with_tone("playful")
    """

    def __init__(
        self,
        target_audience: str = "software developers",
        tone: str = "concise",
    ):
        self._target_audience = target_audience
        self._tone = tone
        self._system_message = ARTICLE_WRITER_PROMPT.render(
            target_audience=target_audience,
            tone=tone,
        )

    @property
    def target_audience(self) -> str:
        return self._target_audience

    @property
    def tone(self) -> str:
        return self._tone

    def with_target_audience(self, target_audience: str) -> ArticleWriter:
        """Return a copy writing for another audience."""
        return ArticleWriter(target_audience=target_audience, tone=self._tone)

    def with_tone(self, tone: str) -> ArticleWriter:
        """Return a copy writing in another tone."""
        return ArticleWriter(target_audience=self._target_audience, tone=tone)

    def name(self) -> str:
        return "ArticleWriter"

    def system_message(self) -> str:
        return self._system_message
