"""
Jinja2 template environment and page-context builders.
"""
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi.templating import Jinja2Templates

from forest_console.config import settings
from forest_console.domain.registry import all_schemas
from forest_console.domain.schema import FilterKind
from forest_console.domain.session import SessionContext
from forest_console.services.application.view_controller import EntityViewController
from forest_console.services.domain import forms, listing

WEB_DIR = Path(__file__).resolve().parent
TEMPLATE_DIR = WEB_DIR / "templates"
STATIC_DIR = WEB_DIR / "static"

templates = Jinja2Templates(directory=str(TEMPLATE_DIR))
templates.env.globals["app_name"] = settings.app_name
templates.env.globals["app_version"] = settings.app_version


def base_context(session: Optional[SessionContext]) -> Dict[str, Any]:
    return {
        "session": session,
        "sections": all_schemas(),
    }


def _filter_inputs(controller: EntityViewController) -> List[Dict[str, Any]]:
    inputs = []
    for spec in controller.schema.filters:
        value = controller.filters.get(spec.key, spec.empty_value())
        item = {
            "key": spec.key,
            "label": spec.label,
            "kind": spec.kind.value,
            "options": spec.options,
            "value": value,
        }
        if spec.kind == FilterKind.DATE_RANGE:
            item["start"], item["end"] = value
        inputs.append(item)
    return inputs


def entity_page_context(
    controller: EntityViewController,
    session: Optional[SessionContext],
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Everything ``entity.html`` renders, derived from controller state.

    Draining the notifications here means each one is shown exactly once.
    """
    schema = controller.schema
    records = controller.record_dicts
    context = base_context(session)
    context.update({
        "schema": schema,
        "status": controller.status,
        "columns": schema.table_fields,
        "rows": listing.table_rows(schema, records),
        "stats": listing.compute_stats(schema, records, today or controller.today()),
        "filters": _filter_inputs(controller),
        "notifications": controller.drain_notifications(),
        "form_mode": controller.form_mode,
        "form_fields": [],
        "form_title": None,
    })
    if controller.form_mode is not None:
        context["form_fields"] = forms.render_form(
            schema,
            controller.draft,
            controller.form_mode,
            errors=controller.field_errors,
            raw_inputs=controller.rejected_inputs,
        )
        state = controller.form_state
        record_id = getattr(state, "record_id", None)
        if controller.form_mode == forms.PARTIAL:
            context["form_title"] = f"Quick Update {schema.singular} #{record_id}"
        elif record_id is not None:
            context["form_title"] = f"Edit {schema.singular} #{record_id}"
        else:
            context["form_title"] = f"Add New {schema.singular}"
    return context
