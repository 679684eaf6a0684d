"""
Domain service: entity form rendering and draft editing.

A draft is a plain dict keyed by wire field name. Drafts are never mutated
in place: every edit returns a new dict with one key replaced.
"""
import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

from forest_console.domain.schema import EntitySchema, FieldKind, FieldSpec

FULL = "full"
PARTIAL = "partial"

_INPUT_TYPES = {
    FieldKind.TEXT: "text",
    FieldKind.EMAIL: "email",
    FieldKind.INTEGER: "number",
    FieldKind.DECIMAL: "number",
    FieldKind.DATE: "date",
    FieldKind.TIME: "time",
    FieldKind.REFERENCE: "number",
}
_TRUTHY = {"on", "true", "1", "yes"}


class FieldInputError(ValueError):
    """User input that cannot be stored in a field."""

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


@dataclass(frozen=True)
class FormField:
    """Everything a template needs to render one form control."""
    name: str
    label: str
    control: str
    input_type: str
    value: str
    options: Tuple[str, ...] = ()
    required: bool = False
    checked: bool = False
    step: Optional[str] = None
    error: Optional[str] = None


def form_fields(schema: EntitySchema, mode: str) -> Tuple[FieldSpec, ...]:
    """Fields shown by the full (add/edit) form or the quick-update form."""
    if mode == PARTIAL:
        return tuple(schema.field(name) for name in schema.partial_fields)
    return schema.fields


def default_value(spec: FieldSpec, today: date) -> Any:
    if spec.has_default:
        return spec.default
    if spec.kind == FieldKind.DATE:
        return today.isoformat()
    if spec.is_numeric:
        return 0
    if spec.kind == FieldKind.BOOLEAN:
        return False
    if spec.kind in (FieldKind.TIME, FieldKind.REFERENCE):
        return None
    return ""


def default_draft(schema: EntitySchema, today: date) -> Dict[str, Any]:
    """Draft for a new record: empty text, zero numbers, today's date, default enum values."""
    return {spec.name: default_value(spec, today) for spec in schema.fields}


def partial_draft(schema: EntitySchema, record: Mapping[str, Any]) -> Dict[str, Any]:
    """Draft holding only the quick-update subset of ``record``."""
    return {name: record.get(name) for name in schema.partial_fields}


def with_field(draft: Mapping[str, Any], name: str, value: Any) -> Dict[str, Any]:
    updated = dict(draft)
    updated[name] = value
    return updated


def parse_input(spec: FieldSpec, raw: Any) -> Any:
    """
    Convert raw form input into the field's wire value.

    Empty numeric, date, time and reference input means "unspecified" and
    yields None. Enum fields accept any string; the option list only limits
    what the control offers.

    Raises:
        FieldInputError: If numeric input cannot be parsed
    """
    if spec.kind == FieldKind.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        return str(raw or "").strip().lower() in _TRUTHY

    text = "" if raw is None else str(raw).strip()

    if spec.kind == FieldKind.INTEGER:
        if not text:
            return None
        try:
            return int(text)
        except ValueError:
            raise FieldInputError(spec.name, f"{spec.label} must be a whole number")

    if spec.kind == FieldKind.DECIMAL:
        if not text:
            return None
        try:
            value = float(text)
        except ValueError:
            raise FieldInputError(spec.name, f"{spec.label} must be a number")
        if not math.isfinite(value):
            raise FieldInputError(spec.name, f"{spec.label} must be a number")
        return value

    if spec.kind == FieldKind.REFERENCE:
        if not text:
            return None
        try:
            return {spec.reference_key or "id": int(text)}
        except ValueError:
            raise FieldInputError(spec.name, f"{spec.label} must be a record number")

    if spec.kind in (FieldKind.DATE, FieldKind.TIME):
        return text or None

    return "" if raw is None else str(raw)


def apply_input(
    schema: EntitySchema,
    draft: Mapping[str, Any],
    name: str,
    raw: Any,
) -> Dict[str, Any]:
    """
    Return a new draft with one field replaced by parsed user input.

    Raises:
        KeyError: If the entity has no such field
        FieldInputError: If the input cannot be parsed
    """
    spec = schema.field(name)
    return with_field(draft, name, parse_input(spec, raw))


def input_value(spec: FieldSpec, value: Any) -> str:
    """Text placed in an input's ``value`` attribute."""
    if value is None:
        return ""
    if spec.kind == FieldKind.REFERENCE:
        if isinstance(value, Mapping):
            value = value.get(spec.reference_key or "id")
        return "" if value is None else str(value)
    if isinstance(value, float) and value.is_integer():
        return str(int(value)) if spec.kind == FieldKind.INTEGER else str(value)
    return str(value)


def render_form(
    schema: EntitySchema,
    draft: Mapping[str, Any],
    mode: str,
    errors: Optional[Mapping[str, str]] = None,
    raw_inputs: Optional[Mapping[str, str]] = None,
) -> List[FormField]:
    """
    Build the controls of the form for the given mode.

    ``raw_inputs`` holds rejected text so the user sees what they typed next
    to the error instead of the draft's last good value.
    """
    errors = errors or {}
    raw_inputs = raw_inputs or {}
    controls = []
    for spec in form_fields(schema, mode):
        value = draft.get(spec.name)
        if spec.kind == FieldKind.ENUM:
            options = spec.options
            if value and value not in options:
                options = options + (str(value),)
            controls.append(FormField(
                name=spec.name,
                label=spec.label,
                control="select",
                input_type="select",
                value="" if value is None else str(value),
                options=options,
                required=spec.required,
                error=errors.get(spec.name),
            ))
        elif spec.kind == FieldKind.BOOLEAN:
            controls.append(FormField(
                name=spec.name,
                label=spec.label,
                control="checkbox",
                input_type="checkbox",
                value="true",
                checked=bool(value),
                error=errors.get(spec.name),
            ))
        else:
            controls.append(FormField(
                name=spec.name,
                label=spec.label,
                control="input",
                input_type=_INPUT_TYPES.get(spec.kind, "text"),
                value=raw_inputs.get(spec.name, input_value(spec, value)),
                required=spec.required,
                step="any" if spec.kind == FieldKind.DECIMAL else ("1" if spec.is_numeric else None),
                error=errors.get(spec.name),
            ))
    return controls
