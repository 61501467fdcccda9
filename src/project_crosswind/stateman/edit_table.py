"""Per-flight edit overlay utilities."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Union

from project_crosswind.errors import InvalidEditError
from .types import EditMapping, EditMergePolicy, FlightEditDict

_SERIALIZED_KEYS = {
    "departure_time_delta_s": "departure_time_delta",
    "altitude_delta_ft": "altitude_delta_ft",
    "speed_delta_kts": "speed_delta_kts",
    "route_override": "route_modification",
}
_FIELD_BY_KEY = {v: k for k, v in _SERIALIZED_KEYS.items()}
_NUMERIC_FIELDS = ("departure_time_delta_s", "altitude_delta_ft", "speed_delta_kts")


@dataclass(frozen=True)
class FlightEdit:
    """Hypothetical modification of one flight, applied only at evaluation time."""

    departure_time_delta_s: float = 0.0
    altitude_delta_ft: float = 0.0
    speed_delta_kts: float = 0.0
    route_override: Optional[str] = None

    def __post_init__(self) -> None:
        for name in _NUMERIC_FIELDS:
            value = getattr(self, name)
            try:
                number = float(value)
            except (TypeError, ValueError) as exc:
                raise InvalidEditError(f"Edit field {name} must be numeric, got {value!r}") from exc
            if not math.isfinite(number):
                raise InvalidEditError(f"Edit field {name} must be finite, got {value!r}")
            object.__setattr__(self, name, number)

    def overlay(self, **changes: Any) -> "FlightEdit":
        """Return a copy with ``changes`` replacing the matching fields."""
        unknown = set(changes) - {f.name for f in fields(self)}
        if unknown:
            raise InvalidEditError(f"Unknown edit fields: {sorted(unknown)}")
        return replace(self, **changes)

    @property
    def is_noop(self) -> bool:
        return (
            self.departure_time_delta_s == 0
            and self.altitude_delta_ft == 0
            and self.speed_delta_kts == 0
            and not self.route_override
        )

    def to_dict(self) -> FlightEditDict:
        out: Dict[str, Any] = {}
        for name, key in _SERIALIZED_KEYS.items():
            value = getattr(self, name)
            if value:
                out[key] = value
        return out  # type: ignore[return-value]

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FlightEdit":
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _FIELD_BY_KEY.get(key)
            if name is None:
                raise InvalidEditError(f"Unknown edit key {key!r}")
            if value is None or value == "":
                continue
            kwargs[name] = value
        return cls(**kwargs)


EditLike = Union[FlightEdit, Mapping[str, Any]]


def _as_edit(value: EditLike) -> FlightEdit:
    if isinstance(value, FlightEdit):
        return value
    if isinstance(value, Mapping):
        return FlightEdit.from_dict(value)
    raise InvalidEditError(f"Cannot interpret {value!r} as a flight edit")


class EditTable:
    """Sparse mapping ACID -> FlightEdit. Absent keys mean "no change"."""

    def __init__(self, edits: Optional[Mapping[str, EditLike]] = None):
        self._edits: Dict[str, FlightEdit] = {}
        if edits:
            for acid, edit in edits.items():
                self[acid] = edit

    # --- basic mapping protocol -------------------------------------------------
    def __getitem__(self, acid: str) -> FlightEdit:
        return self._edits[acid]

    def __setitem__(self, acid: str, edit: EditLike) -> None:
        self._edits[str(acid)] = _as_edit(edit)

    def __delitem__(self, acid: str) -> None:
        del self._edits[acid]

    def __contains__(self, acid: object) -> bool:
        return acid in self._edits

    def __iter__(self) -> Iterator[str]:
        return iter(self._edits)

    def __len__(self) -> int:
        return len(self._edits)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, EditTable):
            return self._edits == other._edits
        return NotImplemented

    def __repr__(self) -> str:
        return f"EditTable({len(self._edits)} flights)"

    def items(self) -> Iterable[tuple[str, FlightEdit]]:
        return self._edits.items()

    def get(self, acid: str, default: Optional[FlightEdit] = None) -> Optional[FlightEdit]:
        """
        Return the stored edit for a flight or ``default`` when it has none.

        Parameters:
            acid (str): Flight identifier to look up.
            default (Optional[FlightEdit]): Value returned when ``acid`` is not in the table.

        Returns:
            Optional[FlightEdit]: The flight's edit, or ``default`` if missing.
        """
        return self._edits.get(acid, default)

    def copy(self) -> "EditTable":
        """
        Create a new EditTable holding the same edits.

        Returns:
            EditTable: An independent table; ``FlightEdit`` values are frozen, so
            sharing them between tables is safe.
        """
        return EditTable(self._edits)

    # --- operations ----------------------------------------------------------------
    def with_edit(self, acid: str, **changes: Any) -> "EditTable":
        """
        Return a new table where ``acid``'s edit has ``changes`` overlaid.

        Fields not named in ``changes`` keep their current value; the receiver
        is left untouched.
        """
        trial = self.copy()
        current = trial._edits.get(acid, FlightEdit())
        trial._edits[str(acid)] = current.overlay(**changes)
        return trial

    def merge(self, other: Union[Mapping[str, EditLike], "EditTable"], *,
              policy: EditMergePolicy = "overwrite") -> "EditTable":
        """
        Merge edits from ``other`` into a new table.

        ``overwrite`` replaces a flight's whole edit, ``overlay`` replaces only
        the non-default fields carried by the incoming edit.
        """
        if policy not in {"overwrite", "overlay"}:
            raise ValueError(f"Unsupported merge policy: {policy}")
        merged = self.copy()
        source = other._edits if isinstance(other, EditTable) else other
        for acid, incoming in source.items():
            edit = _as_edit(incoming)
            if policy == "overwrite" or acid not in merged._edits:
                merged._edits[str(acid)] = edit
            else:
                changes = {
                    name: getattr(edit, name)
                    for name in _SERIALIZED_KEYS
                    if getattr(edit, name)
                }
                merged._edits[str(acid)] = merged._edits[acid].overlay(**changes)
        return merged

    def without(self, acid: str) -> "EditTable":
        """
        Return a copy of the table with ``acid``'s edit removed.

        Parameters:
            acid (str): Flight whose edit is dropped; absent flights are ignored.

        Returns:
            EditTable: New table; the receiver is left untouched.
        """
        trial = self.copy()
        trial._edits.pop(acid, None)
        return trial

    def nonzero_items(self) -> Iterable[tuple[str, FlightEdit]]:
        return ((acid, edit) for acid, edit in self._edits.items() if not edit.is_noop)

    def total_delay_minutes(self) -> float:
        """Sum of signed departure-time deltas, in minutes."""
        return sum(edit.departure_time_delta_s for edit in self._edits.values()) / 60.0

    def total_altitude_change_ft(self) -> float:
        """Sum of absolute altitude deltas, in feet."""
        return sum(abs(edit.altitude_delta_ft) for edit in self._edits.values())

    # --- factories ----------------------------------------------------------------
    @classmethod
    def from_dict(cls, data: Mapping[str, Mapping[str, Any]]) -> "EditTable":
        """
        Create an EditTable from serialized per-flight edit dictionaries.

        Parameters:
            data (Mapping[str, Mapping[str, Any]]): Mapping of ACID to a dict using the
                serialized keys (``departure_time_delta``, ``altitude_delta_ft``,
                ``speed_delta_kts``, ``route_modification``).

        Returns:
            EditTable: A new table with one ``FlightEdit`` per entry.

        Raises:
            InvalidEditError: If an entry carries an unknown key or a non-numeric delta.
        """
        return cls({str(acid): FlightEdit.from_dict(edit) for acid, edit in data.items()})

    def to_dict(self) -> EditMapping:
        """
        Return a plain dictionary of serialized edits.

        Returns:
            EditMapping: ACID to ``FlightEditDict``; default-valued fields are omitted.
        """
        return {acid: edit.to_dict() for acid, edit in self._edits.items()}

    @classmethod
    def load_json(cls, path: str | Path) -> "EditTable":
        """
        Create an EditTable from a JSON file written by ``save_json``.

        Parameters:
            path (str | Path): Filesystem path to a JSON object mapping ACID to edit dicts.

        Returns:
            EditTable: Table populated from the JSON mapping.

        Raises:
            InvalidEditError: If the JSON top-level value is not a mapping, or an
                entry cannot be interpreted as an edit.
        """
        with open(path, "r", encoding="utf-8") as handle:
            payload = json.load(handle)
        if not isinstance(payload, Mapping):
            raise InvalidEditError("EditTable JSON payload must be a mapping")
        return cls.from_dict(payload)

    def save_json(self, path: str | Path) -> None:
        """Write non-trivial edits as JSON with sorted keys."""
        data = {acid: edit.to_dict() for acid, edit in self.nonzero_items()}
        with Path(path).open("w", encoding="utf-8") as handle:
            json.dump(data, handle, indent=2, sort_keys=True)


__all__ = ["FlightEdit", "EditTable", "EditLike"]
