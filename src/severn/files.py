"""File ingestion and chunking for vector data sources."""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path


class File(ABC):
    """A text file split into passages for embedding.

    Attributes:
        contents: Full text of the file.
        source: Path the file was read from, if any.
    """

    def __init__(self, contents: str, source: Path | None = None):
        self.contents = contents
        self.source = source

    @classmethod
    def from_filepath(cls, path: str | Path) -> File:
        """Read a file from disk.

        Raises:
            OSError: If the file cannot be read.
        """
        path = Path(path)
        return cls(path.read_text(encoding="utf-8"), source=path)

    @abstractmethod
    def parse(self) -> list[str]:
        """Split the contents into passages."""
        pass


class ParagraphTextSplitter(File):
    """Plain text split on blank lines."""

    def parse(self) -> list[str]:
        paragraphs = self.contents.replace("\r\n", "\n").split("\n\n")
        return [p.strip() for p in paragraphs if p.strip()]


class CSVFile(File):
    """CSV text with one passage per row."""

    def parse(self) -> list[str]:
        return [line for line in self.contents.splitlines() if line.strip()]


class _MarkdownState(Enum):
    NONE = "none"
    CODE_BLOCK = "code_block"
    SENTENCE = "sentence"
    COMMENTS = "comments"


class MarkdownFile(File):
    """Markdown split into paragraphs and fenced code blocks.

    Headings, horizontal rules and ``---`` delimited frontmatter are
    dropped; a fenced code block is always kept whole as one passage.
    Frontmatter is only recognised at the top of the file.
    """

    def parse(self) -> list[str]:
        chunks: list[str] = []
        state = _MarkdownState.NONE
        lines: list[str] = []
        at_top = True

        for line in self.contents.splitlines():
            if state is _MarkdownState.NONE:
                if line.startswith("```"):
                    state = _MarkdownState.CODE_BLOCK
                    lines = [line]
                elif line.startswith("---"):
                    if at_top:
                        state = _MarkdownState.COMMENTS
                elif line and not line.startswith("#"):
                    state = _MarkdownState.SENTENCE
                    lines = [line]
                if line.strip():
                    at_top = False
            elif state is _MarkdownState.CODE_BLOCK:
                lines.append(line)
                if line.startswith("```"):
                    chunks.append("\n".join(lines))
                    lines = []
                    state = _MarkdownState.NONE
            elif state is _MarkdownState.COMMENTS:
                if line.startswith("---"):
                    state = _MarkdownState.NONE
            elif state is _MarkdownState.SENTENCE:
                if not line:
                    chunks.append("\n".join(lines))
                    lines = []
                    state = _MarkdownState.NONE
                else:
                    lines.append(line)

        # A trailing paragraph has no blank line after it
        if state is _MarkdownState.SENTENCE and lines:
            chunks.append("\n".join(lines))

        return chunks
