"""Internationalisation helpers."""

from harmonydb.i18n.expand import expand

__all__ = ["expand"]
