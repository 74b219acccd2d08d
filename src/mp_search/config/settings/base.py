"""Config settings – Settings base class and SearchSettings."""
from __future__ import annotations

import dataclasses

import pendulum

from mp_search.config.validation.errors import InvalidSettingValueError


@dataclasses.dataclass
class Settings:
    """Base class for 12-factor settings."""

    _prefix: dataclasses.ClassVar[str] = ""

    def __post_init__(self) -> None:
        self._validate()

    def _validate(self) -> None:
        """Override to add cross-field validation."""


@dataclasses.dataclass
class SearchSettings(Settings):
    """Connection and behaviour settings for the search engine client.

    ``suppress_transport_errors`` is the production switch: when set, a
    failed search/aggregation call is logged and answered with an empty
    result instead of raising.
    """

    _prefix: dataclasses.ClassVar[str] = "ELASTICSEARCH"

    hosts: list[str] = dataclasses.field(default_factory=lambda: ["http://localhost:9200"])
    username: str | None = None
    password: str | None = None
    api_key: str | None = None
    ca_certs: str | None = None
    request_timeout: float = 10.0
    timezone: str = "UTC"
    suppress_transport_errors: bool = False

    def _validate(self) -> None:
        if not self.hosts:
            raise InvalidSettingValueError("hosts", self.hosts, "at least one host is required")
        if self.request_timeout <= 0:
            raise InvalidSettingValueError("request_timeout", self.request_timeout, "must be positive")
        if (self.username is None) != (self.password is None):
            raise InvalidSettingValueError("username", self.username, "username and password go together")
        try:
            pendulum.timezone(self.timezone)
        except Exception as exc:  # noqa: BLE001 – pendulum raises several lookup errors
            raise InvalidSettingValueError("timezone", self.timezone, "unknown timezone") from exc

    @property
    def basic_auth(self) -> tuple[str, str] | None:
        if self.username is None or self.password is None:
            return None
        return (self.username, self.password)


__all__ = ["SearchSettings", "Settings"]
