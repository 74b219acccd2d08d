"""Config settings – SettingsFactory."""
from __future__ import annotations

import dataclasses
import logging
from typing import Any, Sequence, TypeVar

from mp_search.config.settings.base import Settings
from mp_search.config.settings.loaders import DotenvSettingsLoader, EnvSettingsLoader, SettingsLoader
from mp_search.config.validation.errors import ConfigError, MissingRequiredSettingError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Settings)


def _declared_defaults(settings_cls: type[Settings]) -> dict[str, Any]:
    defaults: dict[str, Any] = {}
    for field in dataclasses.fields(settings_cls):  # type: ignore[arg-type]
        if field.default is not dataclasses.MISSING:
            defaults[field.name] = field.default
        elif field.default_factory is not dataclasses.MISSING:  # type: ignore[misc]
            defaults[field.name] = field.default_factory()  # type: ignore[misc]
    return defaults


class SettingsFactory:
    """Layer several settings sources into one validated settings object.

    Each loader only contributes the fields whose value differs from the
    declared default, so a later source never resets what an earlier one
    set. *overrides* are applied last.
    """

    @staticmethod
    def create(
        settings_cls: type[T],
        loaders: Sequence[SettingsLoader] | None = None,
        overrides: dict[str, Any] | None = None,
    ) -> T:
        """
        Parameters
        ----------
        settings_cls:
            The :class:`~mp_search.config.settings.base.Settings` subclass to
            build, e.g. :class:`~mp_search.config.settings.base.SearchSettings`.
        loaders:
            Sources in increasing priority. A loader that raises
            :class:`ConfigError` is logged and skipped.
        overrides:
            Explicit values, typically from a test or a command line.

        Raises
        ------
        MissingRequiredSettingError
            A field without default got no value from any source.
        InvalidSettingValueError
            The merged values fail the settings' own validation.
        ConfigError
            Any other construction failure, such as an unknown override key.
        """
        defaults = _declared_defaults(settings_cls)
        merged: dict[str, Any] = {}

        for loader in loaders or []:
            try:
                instance = loader.load(settings_cls)
            except ConfigError as exc:
                logger.warning("config.loader_skipped loader=%s code=%s", type(loader).__name__, exc.code)
                continue
            for field in dataclasses.fields(instance):  # type: ignore[arg-type]
                value = getattr(instance, field.name)
                if field.name not in defaults or value != defaults[field.name]:
                    merged[field.name] = value

        merged.update(overrides or {})

        for field in dataclasses.fields(settings_cls):  # type: ignore[arg-type]
            if field.name not in merged and field.name not in defaults:
                raise MissingRequiredSettingError(field.name)

        try:
            return settings_cls(**merged)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Cannot build {settings_cls.__name__}: {exc}", cause=exc) from exc

    @classmethod
    def from_environment(cls, settings_cls: type[T], env_file: str | None = None) -> T:
        """Read *settings_cls* from environment variables, loading *env_file* into them first.

        Unlike :meth:`create`, a bad variable is raised, not skipped.
        """
        loader = DotenvSettingsLoader(env_file) if env_file is not None else EnvSettingsLoader()
        return loader.load(settings_cls)


__all__ = ["SettingsFactory"]
