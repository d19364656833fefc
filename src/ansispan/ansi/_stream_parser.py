from __future__ import annotations

from functools import lru_cache
import re

import rich.repr

from typing import Callable, Generator, Iterable

type TokenMatch = tuple[str, str]

type ParseResult[ParseType] = Generator[StreamRead | ParseType, Token, None]
type PatternCheck = Generator[None, str, TokenMatch | bool | None]


@rich.repr.auto
class Pattern[ValueType]:
    """A pattern matched one character at a time.

    Subclasses implement `check` as a generator which receives characters
    and returns a `TokenMatch` on success, or `False` if the characters
    can't be part of the pattern.
    """

    def __init__(self) -> None:
        self._send: Callable[[str], None] | None = None
        self.value: ValueType | None = None

    def feed(self, character: str) -> bool | TokenMatch | None:
        if self._send is None:
            generator = self.check()
            self._send = generator.send
            next(generator)
        try:
            self._send(character)
        except StopIteration as stop_iteration:
            return stop_iteration.value
        else:
            return None

    def check(self) -> PatternCheck:
        return False
        yield


class StreamRead[ResultType]:
    pass


@rich.repr.auto
class ReadUntil[ResultType](StreamRead[ResultType]):
    def __init__(self, *characters: str) -> None:
        self.characters = characters
        self._regex = re.compile(
            "|".join(re.escape(character) for character in characters)
        )

    def __rich_repr__(self) -> rich.repr.Result:
        yield from self.characters


@rich.repr.auto
class ReadPatterns[ResultType](StreamRead[ResultType]):
    def __init__(self, start: str = "", **patterns: Pattern) -> None:
        self.patterns = patterns
        self._text: list[str] = [start] if start else []

    @property
    def unconsumed_text(self) -> str:
        return "".join(self._text)

    def __rich_repr__(self) -> rich.repr.Result:
        for key, value in self.patterns.items():
            yield key, value

    @property
    def is_exhausted(self) -> bool:
        return not self.patterns

    def feed(self, text: str) -> tuple[int, TokenMatch | None]:
        """Feed characters to the patterns.

        The character which exhausts the last pattern is not consumed, so
        the parser sees it again once the failed sequence has been handled.

        Args:
            text: Text to feed.

        Returns:
            A tuple of the number of characters consumed, and a match or `None`.
        """
        consumed = 0
        for consumed, character in enumerate(text, 1):
            for name, sequence_validator in list(self.patterns.items()):
                value = sequence_validator.feed(character)
                if value is False:
                    self.patterns.pop(name)
                elif value:
                    return consumed, (name, value)
            if not self.patterns:
                consumed -= 1
                break
        self._text.append(text[:consumed])
        return consumed, None


@rich.repr.auto
class Token:
    def __init__(self, text: str = "") -> None:
        self.text = text

    def __rich_repr__(self) -> rich.repr.Result:
        yield self.text

    def __str__(self) -> str:
        return self.text


class SeparatorToken(Token):
    pass


class EOFToken(Token):
    pass


class PatternToken(Token):
    def __init__(self, name: str, value: TokenMatch) -> None:
        self.name = name
        self.value = value
        super().__init__("")

    def __rich_repr__(self) -> rich.repr.Result:
        yield self.name
        yield None, self.value


@lru_cache(1024)
def _read_until(*characters: str) -> ReadUntil:
    return ReadUntil(*characters)


class StreamParser[ParseType]:
    """Parses a stream of text into tokens."""

    def __init__(self) -> None:
        self._gen: ParseResult[ParseType] | None = self.parse()
        self._reading: StreamRead | ParseType = next(self._gen)

    @property
    def reading(self) -> StreamRead | ParseType:
        """What the parser is currently waiting on."""
        return self._reading

    def read_until(self, *characters: str) -> ReadUntil:
        """Read until the given characters.

        Args:
            characters: Set of characters to stop read.

        """
        return _read_until(*characters)

    def read_patterns(self, start: str = "", **patterns: Pattern) -> ReadPatterns:
        """Read until a pattern matches, or the patterns have been exhausted.

        Args:
            start: Initial part of the string.
            **patterns: One or more patterns.
        """
        return ReadPatterns(start, **patterns)

    def feed(self, text: str) -> Iterable[Token | ParseType]:
        """Feed text in to parser.

        Args:
            text: Text from stream.

        Returns:
            A generator of tokens or the parse type.

        """
        if not text or self._gen is None:
            yield EOFToken()
            return

        def send(token: Token) -> Iterable[Token | ParseType]:
            assert self._gen is not None
            try:
                while True:
                    new_token = self._gen.send(token)
                    if isinstance(new_token, StreamRead):
                        self._reading = new_token
                        break
                    else:
                        token = new_token
                        yield token

            except StopIteration:
                self._gen.close()
                self._gen = None

        while text and self._gen is not None:
            if isinstance(self._reading, ReadUntil):
                if (match := self._reading._regex.search(text)) is not None:
                    start, end = match.span(0)
                    read_text = text[:start]

                    if read_text:
                        yield from send(Token(read_text))
                        text = text[start:]
                    else:
                        yield from send(SeparatorToken(text[start:end]))
                        text = text[end:]
                else:
                    yield from send(Token(text))
                    text = ""

            elif isinstance(self._reading, ReadPatterns):
                consumed, pattern_match = self._reading.feed(text)

                if pattern_match is not None:
                    name, value = pattern_match
                    yield from send(PatternToken(name, value))
                    text = text[consumed:]
                else:
                    if self._reading.is_exhausted:
                        unconsumed_text = self._reading.unconsumed_text
                        yield from send(Token(unconsumed_text))
                        text = text[consumed:]
                    else:
                        text = ""
            else:
                break

    def parse(self) -> ParseResult[ParseType]:
        yield from ()
