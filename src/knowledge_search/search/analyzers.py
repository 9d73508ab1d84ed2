"""Analyzer utilities for the portal search stack.

Mirrors Whoosh's composable tokenizer/filter design without pulling in heavy
dependencies. Text is lowercased before tokenizing; every character that is
not an ASCII word character or in the Hiragana, Katakana or CJK ideograph
blocks acts as a separator.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
import re
from typing import Protocol


@dataclass
class Token:
    """Represents a token emitted by analyzers."""

    text: str
    position: int
    start_char: int
    end_char: int


class Tokenizer(Protocol):
    """Protocol implemented by tokenizers."""

    def __call__(self, text: str) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


class TokenFilter(Protocol):
    """Protocol implemented by token filters."""

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:  # pragma: no cover - interface definition
        ...


# ASCII word characters plus Hiragana (U+3040-309F), Katakana (U+30A0-30FF)
# and CJK unified ideographs (U+4E00-9FAF).
PORTAL_TOKEN_PATTERN = r"[0-9A-Za-z_\u3040-\u309F\u30A0-\u30FF\u4E00-\u9FAF]+"


class RegexTokenizer:
    """Regex-based tokenizer that yields word tokens."""

    def __init__(self, pattern: str = PORTAL_TOKEN_PATTERN, flags: int = re.UNICODE | re.MULTILINE) -> None:
        self.pattern = re.compile(pattern, flags)

    def __call__(self, text: str) -> Iterator[Token]:
        for position, match in enumerate(self.pattern.finditer(text)):
            yield Token(
                text=match.group(0),
                position=position,
                start_char=match.start(),
                end_char=match.end(),
            )


DEFAULT_STOPWORDS = [
    # Japanese particles
    "の",
    "に",
    "は",
    "を",
    "が",
    "で",
    "と",
    "から",
    "まで",
    "より",
    "も",
    "か",
    "や",
    "など",
    # English function words
    "the",
    "a",
    "an",
    "and",
    "or",
    "but",
    "in",
    "on",
    "at",
    "to",
    "for",
    "of",
    "with",
    "by",
]


class StopFilter:
    """Removes stopwords from the stream."""

    def __init__(self, stopwords: Sequence[str] | None = None) -> None:
        vocab = stopwords if stopwords is not None else DEFAULT_STOPWORDS
        self.stopwords = {word.lower() for word in vocab}

    def __call__(self, tokens: Iterable[Token]) -> Iterator[Token]:
        for token in tokens:
            if token.text not in self.stopwords:
                yield token


class AnalyzerPipeline:
    """Composable analyzer pipeline (tokenizer + filters)."""

    def __init__(self, tokenizer: Tokenizer, filters: Sequence[TokenFilter] | None = None) -> None:
        self.tokenizer = tokenizer
        self.filters = list(filters or [])

    def __call__(self, text: str) -> list[Token]:
        stream: Iterable[Token] = self.tokenizer(text)
        for token_filter in self.filters:
            stream = token_filter(stream)
        tokens = list(stream)
        for idx, token in enumerate(tokens):  # normalize positions post-filtering
            token.position = idx
        return tokens


class PortalAnalyzer:
    """Default analyzer for portal content and queries.

    No stemming and no minimum token length, so single-character CJK tokens
    survive.
    """

    def __init__(self, *, stopwords: Sequence[str] | None = None) -> None:
        self.pipeline = AnalyzerPipeline(RegexTokenizer(), [StopFilter(stopwords)])

    def __call__(self, text: str) -> list[Token]:
        if not text:
            return []
        return self.pipeline(text.lower())

    def terms(self, text: str) -> list[str]:
        """Return the token texts for ``text`` in order."""
        return [token.text for token in self(text)]


_default_analyzer = PortalAnalyzer()


def tokenize(text: str) -> list[str]:
    """Lowercase, split and stop-filter ``text`` with the default analyzer.

    Examples:
        >>> tokenize("The React入門 and Next.js")
        ['react入門', 'next', 'js']
        >>> tokenize("   ")
        []
    """
    return _default_analyzer.terms(text)
