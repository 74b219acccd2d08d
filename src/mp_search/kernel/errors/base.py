"""Root error class for the mp-search error hierarchy."""

from __future__ import annotations

from typing import Any


class BaseError(Exception):
    """Root of every error raised by mp-search.

    ``code`` is a stable slug for callers that branch on the kind of failure,
    ``detail`` holds the offending values and ``cause`` the lower level
    exception, if there was one.
    """

    default_code: str = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __str__(self) -> str:
        # same key=value layout as the log events
        if not self.detail:
            return self.message
        pairs = " ".join(f"{key}={value!r}" for key, value in self.detail.items())
        return f"{self.message} ({pairs})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "detail": self.detail,
        }
        if self.cause is not None:
            payload["cause"] = f"{type(self.cause).__name__}: {self.cause}"
        return payload


__all__ = ["BaseError"]
