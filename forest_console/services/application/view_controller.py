"""
Application service: state controller for one entity management screen.

The controller is the single source of truth for a screen: the displayed
list, the open form and its draft, the filter inputs, the loading flag and
the notifications waiting to be shown. It coordinates the gateway and the
form/listing domain services but holds no rendering logic itself.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel

from forest_console.domain.models import to_record
from forest_console.domain.schema import EntitySchema, FieldKind, FilterKind, FilterSpec
from forest_console.infrastructure.api_client import GatewayError, NotFoundError
from forest_console.infrastructure.gateway import EntityGateway
from forest_console.services.domain import forms

logger = logging.getLogger(__name__)


# Form state: exactly one of these at a time
@dataclass(frozen=True)
class Closed:
    name = "idle"


@dataclass(frozen=True)
class Add:
    name = "form:add"


@dataclass(frozen=True)
class EditFull:
    record_id: int
    name = "form:edit-full"


@dataclass(frozen=True)
class EditPartial:
    record_id: int
    name = "form:edit-partial"


FormState = Union[Closed, Add, EditFull, EditPartial]
CLOSED = Closed()


@dataclass(frozen=True)
class Notification:
    """A message for the user about the outcome of their last action."""
    level: str
    message: str


class EntityViewController:
    """
    View state for one entity screen.

    Every gateway failure is caught where the call is made, logged and
    turned into an error notification; the displayed list is only replaced
    after a fetch succeeds, and the loading flag is always reset.
    """

    def __init__(
        self,
        schema: EntitySchema,
        gateway: EntityGateway,
        today: Callable[[], date] = date.today,
    ):
        """
        Initialize the controller.

        Args:
            schema: Entity descriptor driving forms, filters and stats
            gateway: Remote data gateway for the entity
            today: Clock used for default dates
        """
        self.schema = schema
        self.gateway = gateway
        self.today = today
        self.records: List[BaseModel] = []
        self.loading = False
        self.form_state: FormState = CLOSED
        self.draft: Dict[str, Any] = {}
        self.field_errors: Dict[str, str] = {}
        self.rejected_inputs: Dict[str, str] = {}
        self.filters: Dict[str, Any] = {spec.key: spec.empty_value() for spec in schema.filters}
        self.notifications: List[Notification] = []

    # ------------------------------------------------------------------
    # State inspection
    # ------------------------------------------------------------------

    @property
    def status(self) -> str:
        if self.loading:
            return "loading"
        return self.form_state.name

    @property
    def form_mode(self) -> Optional[str]:
        """``full`` or ``partial`` while a form is open, else None."""
        if isinstance(self.form_state, EditPartial):
            return forms.PARTIAL
        if isinstance(self.form_state, (Add, EditFull)):
            return forms.FULL
        return None

    @property
    def record_dicts(self) -> List[Dict[str, Any]]:
        return [to_record(record) for record in self.records]

    def record_id(self, record: BaseModel) -> Optional[int]:
        return to_record(record).get(self.schema.id_field)

    def find_loaded(self, record_id: int) -> Optional[BaseModel]:
        """The record with ``record_id`` in the currently displayed list."""
        for record in self.records:
            if self.record_id(record) == record_id:
                return record
        return None

    def drain_notifications(self) -> List[Notification]:
        pending, self.notifications = self.notifications, []
        return pending

    def _notify(self, level: str, message: str) -> None:
        self.notifications.append(Notification(level=level, message=message))

    def _failed(self, action: str, error: GatewayError, message: str) -> None:
        logger.error("%s %s failed: %s", self.schema.key, action, error)
        self._notify("error", message)

    # ------------------------------------------------------------------
    # Fetching and filtering
    # ------------------------------------------------------------------

    async def _fetch(
        self,
        action: str,
        call: Callable[[], Awaitable[List[BaseModel]]],
        failure_message: str,
    ) -> bool:
        self.loading = True
        try:
            records = await call()
        except GatewayError as e:
            self._failed(action, e, failure_message)
            return False
        finally:
            self.loading = False

        self.records = list(records)
        return True

    async def load(self) -> bool:
        """Fetch the full, unfiltered list."""
        return await self._fetch(
            "fetch",
            self.gateway.list_all,
            f"Failed to fetch {self.schema.title.lower()}. Make sure the backend is running.",
        )

    def set_filter(self, key: str, value: Any) -> None:
        """
        Store a filter input without fetching.

        Raises:
            KeyError: If the entity has no such filter
        """
        spec = self.schema.filter(key)
        if spec.kind == FilterKind.DATE_RANGE:
            start, end = value
            value = (start or "", end or "")
        elif spec.kind == FilterKind.FLAG:
            value = bool(value)
        else:
            value = (value or "").strip()
        self.filters[key] = value

    def active_filter(self) -> Optional[Tuple[FilterSpec, Any]]:
        """The highest-priority filter that has a value; later ones are ignored."""
        for spec in self.schema.filters:
            value = self.filters.get(spec.key)
            if spec.is_set(value):
                return spec, value
        return None

    async def apply_filters(self) -> bool:
        """Run the server-side filter for the first filled-in filter input."""
        active = self.active_filter()
        if active is None:
            return await self.load()

        spec, value = active
        if spec.kind == FilterKind.DATE_RANGE and not all(value):
            self._notify("error", "Please select both start and end dates")
            return False

        filter_value = None if spec.kind == FilterKind.FLAG else value
        return await self._fetch(
            "filter",
            lambda: self.gateway.list_by_filter(spec.path_key, filter_value),
            "Failed to apply filters.",
        )

    async def clear_filters(self) -> bool:
        self.filters = {spec.key: spec.empty_value() for spec in self.schema.filters}
        return await self.load()

    # ------------------------------------------------------------------
    # Forms
    # ------------------------------------------------------------------

    def _open(self, state: FormState, draft: Dict[str, Any]) -> None:
        self.form_state = state
        self.draft = draft
        self.field_errors = {}
        self.rejected_inputs = {}

    async def _resolve(self, record_id: int) -> Optional[BaseModel]:
        """The loaded record, or the backend's copy when it is not displayed."""
        record = self.find_loaded(record_id)
        if record is not None:
            return record
        try:
            return await self.gateway.get_by_id(record_id)
        except NotFoundError as e:
            self._failed("lookup", e, f"{self.schema.singular} #{record_id} no longer exists.")
        except GatewayError as e:
            self._failed("lookup", e, f"Failed to load {self.schema.singular.lower()} #{record_id}.")
        return None

    def open_add(self) -> None:
        self._open(Add(), forms.default_draft(self.schema, self.today()))

    async def open_edit(self, record_id: int) -> bool:
        record = await self._resolve(record_id)
        if record is None:
            return False
        self._open(EditFull(record_id), to_record(record))
        return True

    async def open_quick_update(self, record_id: int) -> bool:
        if not self.schema.supports_quick_update:
            self._notify("error", f"Quick update is not available for {self.schema.title.lower()}.")
            return False
        record = await self._resolve(record_id)
        if record is None:
            return False
        self._open(EditPartial(record_id), forms.partial_draft(self.schema, to_record(record)))
        return True

    def cancel(self) -> None:
        self._open(CLOSED, {})

    def edit_field(self, name: str, raw: Any) -> bool:
        """
        Apply one field edit to the draft.

        Unparseable input leaves the draft untouched and records a field
        error that blocks saving until the field is corrected.
        """
        try:
            self.draft = forms.apply_input(self.schema, self.draft, name, raw)
        except forms.FieldInputError as e:
            self.field_errors[name] = e.message
            self.rejected_inputs[name] = "" if raw is None else str(raw)
            return False
        self.field_errors.pop(name, None)
        self.rejected_inputs.pop(name, None)
        return True

    def edit_fields(self, submitted: Mapping[str, Any]) -> bool:
        """
        Apply a whole form submission to the draft.

        Only fields the current form shows are read. Checkboxes are absent
        from a submission when unticked, so a missing flag means ``False``.
        """
        mode = self.form_mode
        if mode is None:
            return False
        ok = True
        for spec in forms.form_fields(self.schema, mode):
            if spec.name in submitted:
                ok = self.edit_field(spec.name, submitted[spec.name]) and ok
            elif spec.kind == FieldKind.BOOLEAN:
                ok = self.edit_field(spec.name, False) and ok
        return ok

    def _full_payload(self, original: Optional[BaseModel]) -> Dict[str, Any]:
        base = to_record(original) if original is not None else {}
        return {**base, **self.draft}

    def _partial_payload(self, current: BaseModel) -> Dict[str, Any]:
        payload = to_record(current)
        for name in self.schema.partial_fields:
            value = self.draft.get(name)
            if value is not None:
                payload[name] = value
        return payload

    async def save(self) -> bool:
        """
        Submit the open form.

        Add creates the draft. Full edit sends the draft merged over the
        original record. Quick update sends the currently loaded record with
        only the exposed fields overlaid.
        """
        state = self.form_state
        if isinstance(state, Closed):
            return False
        if self.field_errors:
            self._notify("error", "Please correct the highlighted fields.")
            return False

        singular = self.schema.singular
        try:
            if isinstance(state, Add):
                await self.gateway.create(self.draft)
                message = f"{singular} added successfully!"
            elif isinstance(state, EditFull):
                original = self.find_loaded(state.record_id)
                payload = self._full_payload(original)
                await self.gateway.update(state.record_id, payload)
                message = f"{singular} edited successfully!"
            else:
                current = self.find_loaded(state.record_id)
                if current is None:
                    current = await self.gateway.get_by_id(state.record_id)
                await self.gateway.update(state.record_id, self._partial_payload(current))
                message = f"{singular} updated successfully!"
        except GatewayError as e:
            self._failed("save", e, self._save_failure_message(e))
            return False

        self.cancel()
        self._notify("success", message)
        await self.load()
        return True

    def _save_failure_message(self, error: GatewayError) -> str:
        singular = self.schema.singular.lower()
        if isinstance(error, NotFoundError):
            return f"Failed to save {singular}: it no longer exists."
        detail = getattr(error, "detail", None)
        if detail:
            return f"Failed to save {singular}: {detail}"
        return f"Failed to save {singular}."

    # ------------------------------------------------------------------
    # Delete
    # ------------------------------------------------------------------

    async def delete(self, record_id: int, confirmed: bool) -> bool:
        """
        Delete a record after the user confirmed.

        A declined confirmation has no effect. A failed delete leaves the
        displayed list as it was.
        """
        if not confirmed:
            return False

        singular = self.schema.singular
        try:
            await self.gateway.delete(record_id)
        except NotFoundError as e:
            self._failed("delete", e, f"{singular} #{record_id} was not found.")
            return False
        except GatewayError as e:
            self._failed("delete", e, f"Failed to delete {singular.lower()}.")
            return False

        self._notify("success", f"{singular} deleted successfully!")
        await self.load()
        return True
