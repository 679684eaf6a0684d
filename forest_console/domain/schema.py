"""
Field-schema descriptors for entity management screens.

An ``EntitySchema`` tells the generic management view everything it needs
to know about one entity: its wire fields and how each one is edited, which
fields the quick-update form exposes, the server-side filters it offers, how
rows are tiered for display and which summary statistics are folded over the
displayed list.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type

from pydantic import BaseModel


class FieldKind(str, Enum):
    """How a field is edited and parsed."""
    TEXT = "text"
    EMAIL = "email"
    INTEGER = "integer"
    DECIMAL = "decimal"
    DATE = "date"
    TIME = "time"
    ENUM = "enum"
    BOOLEAN = "boolean"
    REFERENCE = "reference"


class FilterKind(str, Enum):
    """Input control used for a filter."""
    TEXT = "text"
    ENUM = "enum"
    DATE = "date"
    DATE_RANGE = "date_range"
    FLAG = "flag"


class StatKind(str, Enum):
    """Fold applied over the displayed list."""
    COUNT = "count"
    SUM = "sum"
    AVERAGE = "average"
    COUNT_MATCHING = "count_matching"
    COUNT_PRESENT = "count_present"
    COUNT_TODAY = "count_today"
    DISTINCT = "distinct"


_UNSET = object()


@dataclass(frozen=True)
class FieldSpec:
    """A single editable or displayed field of an entity."""
    name: str
    label: str
    kind: FieldKind = FieldKind.TEXT
    options: Tuple[str, ...] = ()
    required: bool = False
    default: Any = _UNSET
    in_table: bool = True
    reference_key: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not _UNSET

    @property
    def is_numeric(self) -> bool:
        return self.kind in (FieldKind.INTEGER, FieldKind.DECIMAL)


@dataclass(frozen=True)
class FilterSpec:
    """
    A server-side filter input.

    ``path_key`` names the backend filter route (see
    ``ForestAPIEndpoints.FILTERS``).
    """
    key: str
    label: str
    path_key: str
    kind: FilterKind = FilterKind.TEXT
    options: Tuple[str, ...] = ()

    def empty_value(self) -> Any:
        if self.kind == FilterKind.DATE_RANGE:
            return ("", "")
        if self.kind == FilterKind.FLAG:
            return False
        return ""

    def is_set(self, value: Any) -> bool:
        """True when any part of the filter input has been filled in."""
        if self.kind == FilterKind.DATE_RANGE:
            return any(part for part in value)
        return bool(value)


@dataclass(frozen=True)
class StatSpec:
    """A summary statistic folded over the displayed list."""
    label: str
    kind: StatKind
    field: Optional[str] = None
    values: Tuple[Any, ...] = ()
    precision: Optional[int] = None
    suffix: str = ""


@dataclass(frozen=True)
class SeverityRule:
    """Display-only mapping from a field value to a severity tier."""
    field: str
    tiers: Dict[str, str]
    default: str = "neutral"

    def tier_for(self, value: Any) -> str:
        return self.tiers.get(value, self.default)


@dataclass(frozen=True)
class EntitySchema:
    """Descriptor of one entity management screen."""
    key: str
    title: str
    singular: str
    id_field: str
    zone_field: str
    model: Type[BaseModel]
    fields: Tuple[FieldSpec, ...]
    filters: Tuple[FilterSpec, ...] = ()
    stats: Tuple[StatSpec, ...] = ()
    partial_fields: Tuple[str, ...] = ()
    severity: Optional[SeverityRule] = None
    title_field: Optional[str] = None
    description: str = ""
    _by_name: Dict[str, FieldSpec] = field(default_factory=dict, init=False, repr=False, compare=False)

    def __post_init__(self):
        self._by_name.update({spec.name: spec for spec in self.fields})
        unknown = [name for name in self.partial_fields if name not in self._by_name]
        if unknown:
            raise ValueError(f"{self.key}: quick-update fields {unknown} are not declared")

    @property
    def supports_quick_update(self) -> bool:
        return bool(self.partial_fields)

    @property
    def table_fields(self) -> Tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.in_table)

    def field(self, name: str) -> FieldSpec:
        """
        Look up a field descriptor by wire name.

        Raises:
            KeyError: If the entity has no such field
        """
        return self._by_name[name]

    def filter(self, key: str) -> FilterSpec:
        for spec in self.filters:
            if spec.key == key:
                return spec
        raise KeyError(key)

    def parse(self, payload: Dict[str, Any]) -> BaseModel:
        """Decode a wire record into the entity model."""
        return self.model.model_validate(payload)
