from __future__ import annotations


class ScheduleError(RuntimeError):
    pass


class FetchError(ScheduleError):
    """Upstream request failed: network error, timeout or non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status: int | None = None,
        body: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status = status
        self.body = body
        self.cause = cause


class ParseError(ScheduleError):
    """The fetched document as a whole could not be decoded."""


class ConfigError(ScheduleError):
    """A request parameter or source key is missing or malformed."""
