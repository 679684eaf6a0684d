"""
Router for the generic entity management screens.

Every entity (animals, trees, plants, officers, visitors, resources) is
served by the same routes; the ``{entity}`` path segment selects the
schema. Opening a screen mounts a fresh controller and fetches the list;
each action routes to one controller operation and re-renders the screen.
"""
from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from forest_console.api.dependencies import (
    GatewayFactoryDep,
    SchemaDep,
    SessionDep,
    ViewRegistryDep,
)
from forest_console.domain.schema import EntitySchema, FilterKind
from forest_console.domain.session import SessionContext
from forest_console.services.application.view_controller import EntityViewController
from forest_console.web.templating import entity_page_context, templates


router = APIRouter(tags=["entities"])


async def _current_view(
    schema: EntitySchema,
    session: SessionContext,
    registry,
    gateways,
) -> EntityViewController:
    """The session's controller for this screen, mounting one if needed."""
    controller = registry.get(session.session_id, schema.key)
    if controller is None:
        controller = registry.mount(session.session_id, schema, gateways(schema, session.token))
        await controller.load()
    return controller


def _render(request: Request, controller: EntityViewController, session: SessionContext) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "entity.html",
        entity_page_context(controller, session),
    )


@router.get("/{entity}", response_class=HTMLResponse, summary="Open an entity screen")
async def open_screen(
    request: Request,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    """Mount a fresh screen: filters and forms reset, full list fetched."""
    controller = registry.mount(session.session_id, schema, gateways(schema, session.token))
    await controller.load()
    return _render(request, controller, session)


@router.post("/{entity}/filters", response_class=HTMLResponse)
async def apply_filters(
    request: Request,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    controller = await _current_view(schema, session, registry, gateways)
    submitted = await request.form()
    for spec in schema.filters:
        if spec.kind == FilterKind.DATE_RANGE:
            value = (submitted.get(f"{spec.key}_start", ""), submitted.get(f"{spec.key}_end", ""))
        elif spec.kind == FilterKind.FLAG:
            value = spec.key in submitted
        else:
            value = submitted.get(spec.key, "")
        controller.set_filter(spec.key, value)
    await controller.apply_filters()
    return _render(request, controller, session)


@router.post("/{entity}/filters/clear", response_class=HTMLResponse)
async def clear_filters(
    request: Request,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    controller = await _current_view(schema, session, registry, gateways)
    await controller.clear_filters()
    return _render(request, controller, session)


@router.post("/{entity}/add", response_class=HTMLResponse)
async def open_add_form(
    request: Request,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    controller = await _current_view(schema, session, registry, gateways)
    controller.open_add()
    return _render(request, controller, session)


@router.post("/{entity}/form/save", response_class=HTMLResponse)
async def save_form(
    request: Request,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    """Apply the submitted fields to the draft and save it."""
    controller = await _current_view(schema, session, registry, gateways)
    submitted = await request.form()
    controller.edit_fields(submitted)
    await controller.save()
    return _render(request, controller, session)


@router.post("/{entity}/form/cancel", response_class=HTMLResponse)
async def cancel_form(
    request: Request,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    controller = await _current_view(schema, session, registry, gateways)
    controller.cancel()
    return _render(request, controller, session)


@router.post("/{entity}/{record_id}/edit", response_class=HTMLResponse)
async def open_edit_form(
    request: Request,
    record_id: int,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    controller = await _current_view(schema, session, registry, gateways)
    await controller.open_edit(record_id)
    return _render(request, controller, session)


@router.post("/{entity}/{record_id}/quick-update", response_class=HTMLResponse)
async def open_quick_update_form(
    request: Request,
    record_id: int,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    controller = await _current_view(schema, session, registry, gateways)
    await controller.open_quick_update(record_id)
    return _render(request, controller, session)


@router.post("/{entity}/{record_id}/delete", response_class=HTMLResponse)
async def delete_record(
    request: Request,
    record_id: int,
    schema: SchemaDep,
    session: SessionDep,
    registry: ViewRegistryDep,
    gateways: GatewayFactoryDep,
):
    """Delete a record; ``confirmed=yes`` carries the answer of the browser's confirm prompt."""
    controller = await _current_view(schema, session, registry, gateways)
    submitted = await request.form()
    await controller.delete(record_id, confirmed=submitted.get("confirmed") == "yes")
    return _render(request, controller, session)
