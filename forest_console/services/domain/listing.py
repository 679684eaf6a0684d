"""
Domain service: table rows and summary statistics for an entity list.

Everything here is a pure function of the currently displayed list. Stats
are therefore always consistent with what the table shows, filtered or not.
"""
from dataclasses import dataclass
from datetime import date
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from forest_console.domain.schema import (
    EntitySchema,
    FieldKind,
    FieldSpec,
    StatKind,
    StatSpec,
)

MISSING = "N/A"


@dataclass(frozen=True)
class TableRow:
    """One rendered table row."""
    record_id: Optional[int]
    cells: Tuple[str, ...]
    tier: str
    title: str


@dataclass(frozen=True)
class StatValue:
    label: str
    value: Any
    display: str


def severity_for(schema: EntitySchema, record: Mapping[str, Any]) -> str:
    """Display tier of a record; ``neutral`` when the entity has no rule."""
    if schema.severity is None:
        return "neutral"
    return schema.severity.tier_for(record.get(schema.severity.field))


def format_cell(spec: FieldSpec, value: Any) -> str:
    if value is None or value == "":
        return MISSING
    if spec.kind == FieldKind.BOOLEAN:
        return "Yes" if value else "No"
    if spec.kind == FieldKind.REFERENCE and isinstance(value, Mapping):
        name = " ".join(
            part for part in (value.get("firstName"), value.get("lastName")) if part
        )
        ref = value.get(spec.reference_key or "id")
        return f"{name} (#{ref})" if name else f"#{ref}"
    if spec.kind == FieldKind.DECIMAL and isinstance(value, float):
        return f"{value:g}"
    return str(value)


def table_rows(schema: EntitySchema, records: Sequence[Mapping[str, Any]]) -> List[TableRow]:
    """One row per record, in the order the backend returned them."""
    columns = schema.table_fields
    rows = []
    for record in records:
        rows.append(TableRow(
            record_id=record.get(schema.id_field),
            cells=tuple(format_cell(spec, record.get(spec.name)) for spec in columns),
            tier=severity_for(schema, record),
            title=str(record.get(schema.title_field) or "") if schema.title_field else "",
        ))
    return rows


def _numbers(records: Sequence[Mapping[str, Any]], field: str) -> List[float]:
    values = []
    for record in records:
        value = record.get(field)
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            continue
        values.append(value)
    return values


def compute_stat(stat: StatSpec, records: Sequence[Mapping[str, Any]], today: date) -> Any:
    """
    Fold one statistic over the records.

    Missing or non-numeric values count as zero in sums and averages.
    """
    if stat.kind == StatKind.COUNT:
        return len(records)
    if stat.kind == StatKind.SUM:
        return sum(_numbers(records, stat.field))
    if stat.kind == StatKind.AVERAGE:
        if not records:
            return 0
        return sum(_numbers(records, stat.field)) / len(records)
    if stat.kind == StatKind.COUNT_MATCHING:
        return sum(1 for record in records if record.get(stat.field) in stat.values)
    if stat.kind == StatKind.COUNT_PRESENT:
        return sum(1 for record in records if record.get(stat.field))
    if stat.kind == StatKind.COUNT_TODAY:
        iso_today = today.isoformat()
        return sum(1 for record in records if record.get(stat.field) == iso_today)
    if stat.kind == StatKind.DISTINCT:
        return len({record.get(stat.field) for record in records})
    raise ValueError(f"Unsupported statistic: {stat.kind}")


def format_stat(stat: StatSpec, value: Any) -> str:
    if stat.precision is not None:
        return f"{value:.{stat.precision}f}{stat.suffix}"
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return f"{value}{stat.suffix}"


def compute_stats(
    schema: EntitySchema,
    records: Sequence[Mapping[str, Any]],
    today: Optional[date] = None,
) -> List[StatValue]:
    """Evaluate every statistic the entity declares."""
    today = today or date.today()
    results = []
    for stat in schema.stats:
        value = compute_stat(stat, records, today)
        results.append(StatValue(label=stat.label, value=value, display=format_stat(stat, value)))
    return results
