"""Metric records and the line-protocol batch builder."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import List, Mapping, Optional, Union

Number = Union[int, float]


def _format_value(value) -> str:
    if isinstance(value, bool):
        return "1" if value else "0"
    return str(value)


@dataclass(frozen=True)
class MetricRecord:
    """Immutable snapshot of one measurement.

    Tags and fields are exposed as read-only mappings; ``source`` is always
    the first tag.
    """

    name: str
    tags: Mapping[str, str] = field(default_factory=dict)
    fields: Mapping[str, Number] = field(default_factory=dict)

    def __post_init__(self):
        if not self.name:
            raise ValueError("MetricRecord name must be non-empty")
        if not self.fields or any(not key for key in self.fields):
            raise ValueError(f"MetricRecord '{self.name}' needs at least one named field")
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    @classmethod
    def create(
        cls,
        source: str,
        name: str,
        tags: Optional[Mapping[str, str]],
        fields: Mapping[str, Number],
    ) -> "MetricRecord":
        """Build a record with the ``source`` tag stamped in front."""
        merged = {"source": source}
        if tags:
            merged.update(tags)
        return cls(name=name, tags=merged, fields=fields)

    def __eq__(self, other):
        if not isinstance(other, MetricRecord):
            return NotImplemented
        return (
            self.name == other.name
            and dict(self.tags) == dict(other.tags)
            and dict(self.fields) == dict(other.fields)
        )

    def __hash__(self):
        return hash((self.name, tuple(self.tags.items()), tuple(self.fields.items())))


class MetricBuilder:
    """Accumulates records into one line-protocol batch.

    Line format: ``name[,tag=value]* field=value[,field=value]*``.
    Callers must supply at least one field per line.
    """

    def __init__(self):
        self._lines: List[str] = []

    def append(
        self,
        name: str,
        tags: Optional[Mapping[str, str]],
        fields: Mapping[str, Number],
    ) -> None:
        line = name
        for key, value in (tags or {}).items():
            line += f",{key}={value}"
        line += " " + ",".join(f"{key}={_format_value(value)}" for key, value in fields.items())
        self._lines.append(line)

    def append_record(self, record: MetricRecord) -> None:
        self.append(record.name, record.tags, record.fields)

    def serialize(self, delimiter: str = "\n") -> str:
        return delimiter.join(self._lines)

    def __len__(self) -> int:
        return len(self._lines)
