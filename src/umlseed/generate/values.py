"""Single-cell value synthesis.

Values are returned already rendered as SQL literals: strings, dates and
times are single-quoted, numbers and booleans are bare.
"""

from __future__ import annotations

import itertools
import random
from collections.abc import Callable, Iterator
from datetime import datetime, timedelta

from faker import Faker

from umlseed.generate.guesses import (
    AutoIncrement,
    BoolGuess,
    BoolValueGuess,
    FloatValueGuess,
    IntValueGuess,
    SQLValueGuess,
    StringGuess,
    StringValueGuess,
    TimeGuess,
    TimeValueGuess,
)
from umlseed.project.models import SQLTypeName

LOREM_MIN_WORDS = 3
LOREM_MAX_WORDS = 10  # exclusive

_TIME_FORMATS = {
    SQLTypeName.DATE: "%Y-%m-%d",
    SQLTypeName.TIME: "%H:%M:%S",
    SQLTypeName.DATETIME: "%Y-%m-%d %H:%M:%S",
}


def quote(value: str) -> str:
    """Render a SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def unquote(literal: str) -> str:
    """Inverse of ``quote``."""
    if len(literal) >= 2 and literal[0] == literal[-1] == "'":
        return literal[1:-1].replace("''", "'")
    return literal


class ValueGenerator:
    """Generates cell values from one run-scoped random source."""

    def __init__(
        self,
        rng: random.Random,
        *,
        locale: str = "en_US",
        now: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._rng = rng
        self._now = now
        self._fake = Faker(locale)
        self._fake.seed_instance(rng.getrandbits(64))

    def column_values(self, guess: SQLValueGuess, rows: int) -> list[str]:
        """Values for one column; AUTO_INCREMENT counts from 0 per column."""
        counter = itertools.count()
        return [self.value(guess, counter) for _ in range(rows)]

    def value(self, guess: SQLValueGuess, counter: Iterator[int] | None = None) -> str:
        match guess:
            case IntValueGuess(strategy=AutoIncrement()):
                if counter is None:
                    counter = itertools.count()
                return str(next(counter))
            case IntValueGuess(strategy=strategy):
                return str(self._rng.randint(strategy.min, strategy.max))
            case FloatValueGuess(min=low, max=high):
                return str(round(low + (high - low) * self._rng.random(), 2))
            case TimeValueGuess(type_name=type_name, when=when):
                return quote(self._time(when).strftime(_TIME_FORMATS[type_name]))
            case BoolValueGuess(mode=mode):
                return self._bool(mode)
            case StringValueGuess():
                return quote(self._string(guess)[: guess.max_length])
        raise TypeError(f"Unsupported value guess: {guess!r}")

    def _time(self, when: TimeGuess) -> datetime:
        now = self._now()
        if when is TimeGuess.FUTURE:
            return now + timedelta(days=self._rng.randint(1, 30))
        if when is TimeGuess.PAST:
            return now - timedelta(days=self._rng.randint(7, 365))
        return now

    def _bool(self, mode: BoolGuess) -> str:
        if mode is BoolGuess.TRUE:
            return "1"
        if mode is BoolGuess.FALSE:
            return "0"
        return str(self._rng.randint(0, 1))

    def _lorem(self, max_length: int) -> str:
        # Stop once max_length is exceeded; the caller truncates the overflow
        words = self._fake.words(nb=self._rng.randrange(LOREM_MIN_WORDS, LOREM_MAX_WORDS))
        text = []
        length = 0
        for word in words:
            length += len(word) + 1
            text.append(word)
            if length > max_length:
                break
        return " ".join(text)

    def _url(self) -> str:
        # bs() is "<verb> <adjective> <noun>" and only the noun may contain spaces
        noun = self._fake.bs().split(" ", 2)[-1].lower()
        return f"www.{'-'.join(noun.split())}.{self._fake.tld()}"

    def _string(self, guess: StringValueGuess) -> str:
        fake = self._fake
        match guess.kind:
            case StringGuess.LOREM_IPSUM:
                return self._lorem(guess.max_length)
            case StringGuess.EMPTY:
                return ""
            case StringGuess.FIRST_NAME:
                return fake.first_name()
            case StringGuess.LAST_NAME:
                return fake.last_name()
            case StringGuess.FULL_NAME:
                return fake.name()
            case StringGuess.PHONE_NUMBER:
                return fake.phone_number()
            case StringGuess.CITY_NAME:
                return fake.city()
            case StringGuess.ADDRESS:
                return fake.street_name()
            case StringGuess.EMAIL:
                return fake.free_email()
            case StringGuess.URL:
                return self._url()
            case StringGuess.RANDOM_ENUM:
                return self._rng.choice(guess.options)
