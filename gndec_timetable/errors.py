"""Error hierarchy for timetable scraping.

Only ``FetchError``, ``ParseError`` and ``PersistenceError`` ever reach a
caller. The ``RecoverableError`` family is raised and caught inside the
pipeline so that one malformed table, cell or label never aborts the whole
document.

Example usage with tenacity:
    @retry(retry=retry_if_exception_type(TransientFetchError), stop=stop_after_attempt(3))
    def fetch_html(url: str) -> str:
        ...
"""


class TimetableError(Exception):
    """Base exception for all timetable errors."""

    pass


class FetchError(TimetableError):
    """Source HTML could not be retrieved.

    Not recoverable by the core; the caller treats it as a hard failure for
    that department.
    """

    pass


class TransientFetchError(FetchError):
    """Temporary fetch failure that may succeed on retry.

    Examples: connection reset, read timeout, 502/503/504 from the department site.
    """

    pass


class ParseError(TimetableError):
    """The document contained no locatable timetable at all."""

    pass


class PersistenceError(TimetableError):
    """Writing the group registry or the published document failed.

    Previously persisted files are left untouched.
    """

    pass


class RecoverableError(TimetableError):
    """Irregular source markup, handled locally by degrading gracefully."""

    pass


class LocatorMiss(RecoverableError):
    """A table or its group label could not be resolved; the table is skipped."""

    pass


class ClassificationAmbiguity(RecoverableError):
    """A cell matched no recognized shape; it is treated as a free period."""

    pass


class SectionPatternMismatch(RecoverableError):
    """A section label is not of the department's expandable shape.

    The label is kept as its own single group id.
    """

    pass
