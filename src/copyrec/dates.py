"""Date formatting for text fields.

Patterns use ``strftime``/``strptime`` directives, e.g. ``"%Y%m%d"`` for a
PIC 9(8) birth date or ``"%d/%b/%Y"`` for ``19/Oct/2026``. Passing ``locale``
switches ``LC_TIME`` for the duration of the call so month and weekday names
follow that locale.
"""

from __future__ import annotations

import locale as _locale
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime

from copyrec.errors import InvalidDateValueError, MissingFormatError


@contextmanager
def time_locale(name: str | None) -> Iterator[None]:
    if name is None:
        yield
        return
    saved = _locale.setlocale(_locale.LC_TIME)
    _locale.setlocale(_locale.LC_TIME, name)
    try:
        yield
    finally:
        _locale.setlocale(_locale.LC_TIME, saved)


def format_date(value: date | None, pattern: str | None, locale: str | None = None) -> str:
    if not pattern:
        raise MissingFormatError()
    if value is None:
        return ""
    with time_locale(locale):
        return value.strftime(pattern)


def parse_date(text: str, pattern: str | None, locale: str | None = None) -> datetime:
    if not pattern:
        raise MissingFormatError()
    with time_locale(locale):
        try:
            return datetime.strptime(text.strip(), pattern)
        except ValueError:
            raise InvalidDateValueError(text, pattern) from None
