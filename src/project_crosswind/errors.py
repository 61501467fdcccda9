"""Exception types raised by project_crosswind."""

from __future__ import annotations


class CrosswindError(Exception):
    """Base class for all project_crosswind errors."""


class RouteParseError(CrosswindError, ValueError):
    """A route token or coordinate string could not be parsed."""


class UnknownFlightError(CrosswindError, KeyError):
    """An operation referenced an ACID that is not in the dataset."""


class InvalidEditError(CrosswindError, ValueError):
    """An edit carried a value that cannot be applied to a flight."""


class DatasetError(CrosswindError, ValueError):
    """A flight or airport dataset is malformed."""


__all__ = [
    "CrosswindError",
    "RouteParseError",
    "UnknownFlightError",
    "InvalidEditError",
    "DatasetError",
]
