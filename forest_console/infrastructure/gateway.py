"""
Infrastructure layer: typed gateways over the forest management backend.
"""
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel, ValidationError as PayloadValidationError

from forest_console.domain.schema import EntitySchema
from forest_console.infrastructure.api_client import ForestAPIClient, GatewayError
from forest_console.infrastructure.api_constants import ForestAPIEndpoints


class EntityGateway:
    """
    Remote data gateway for one entity collection.

    Translates list/get/filter/create/update/delete into HTTP calls and
    decodes responses into the entity model. Errors are never handled here;
    they propagate to the caller as ``GatewayError`` subclasses, and so
    does a successful response whose body is not a valid record.
    """

    def __init__(
        self,
        client: ForestAPIClient,
        schema: EntitySchema,
        token: Optional[str] = None,
    ):
        """
        Initialize the gateway.

        Args:
            client: Shared backend HTTP client
            schema: Entity descriptor (path segment, model, id field)
            token: Optional bearer token attached to every request
        """
        self.client = client
        self.schema = schema
        self.token = token

    async def _request(self, method: str, endpoint: str, **kwargs) -> Any:
        return await self.client._make_request(method, endpoint, token=self.token, **kwargs)

    def _decode(self, data: Any) -> BaseModel:
        try:
            return self.schema.parse(data)
        except PayloadValidationError as e:
            raise GatewayError(
                f"Unexpected {self.schema.singular.lower()} payload: {e.error_count()} invalid field(s)"
            ) from e

    def _decode_list(self, data: Any) -> List[BaseModel]:
        if data is None:
            return []
        if not isinstance(data, list):
            raise GatewayError(f"Expected a list of {self.schema.key}, got {type(data).__name__}")
        return [self._decode(item) for item in data]

    def _decode_optional(self, data: Any) -> Optional[BaseModel]:
        """Decode a write response; an empty body (e.g. 204) yields None."""
        if data is None:
            return None
        return self._decode(data)

    async def list_all(self) -> List[BaseModel]:
        """
        Fetch every record of the entity.

        Returns:
            Records in server order
        """
        data = await self._request("GET", ForestAPIEndpoints.collection(self.schema.key))
        return self._decode_list(data)

    async def list_by_filter(self, filter_key: str, value: Any = None) -> List[BaseModel]:
        """
        Fetch records through a server-side filter.

        Args:
            filter_key: Backend filter name, e.g. ``zone`` or ``date-range``
            value: Filter value (a ``(start, end)`` pair for date ranges)

        Returns:
            Matching records in server order
        """
        endpoint, params = ForestAPIEndpoints.filtered(self.schema.key, filter_key, value)
        data = await self._request("GET", endpoint, params=params)
        return self._decode_list(data)

    async def get_by_id(self, record_id: int) -> BaseModel:
        """
        Fetch a single record.

        Raises:
            NotFoundError: If no such record exists
            GatewayError: If the backend answers without a record
        """
        data = await self._request("GET", ForestAPIEndpoints.item(self.schema.key, record_id))
        if data is None:
            raise GatewayError(f"Empty response for {self.schema.singular.lower()} #{record_id}")
        return self._decode(data)

    async def create(self, draft: Mapping[str, Any]) -> Optional[BaseModel]:
        """
        Create a record; the backend assigns the identifier.

        Args:
            draft: Wire-form record without identifier

        Returns:
            The created record as stored by the backend, or None when the
            backend answers without a body

        Raises:
            ValidationError: If the backend rejects the payload
        """
        body = {key: value for key, value in draft.items() if key != self.schema.id_field}
        data = await self._request("POST", ForestAPIEndpoints.collection(self.schema.key), json=body)
        return self._decode_optional(data)

    async def update(self, record_id: int, record: Mapping[str, Any]) -> Optional[BaseModel]:
        """
        Replace a record.

        The backend performs a full replace, so callers merge any unchanged
        fields into ``record`` before calling.
        """
        body: Dict[str, Any] = dict(record)
        body[self.schema.id_field] = record_id
        data = await self._request("PUT", ForestAPIEndpoints.item(self.schema.key, record_id), json=body)
        return self._decode_optional(data)

    async def delete(self, record_id: int) -> None:
        """
        Delete a record.

        Raises:
            NotFoundError: If the record does not exist (including a repeated delete)
        """
        await self._request("DELETE", ForestAPIEndpoints.item(self.schema.key, record_id))


class AuthGateway:
    """Gateway for the backend's login and signup endpoints."""

    def __init__(self, client: ForestAPIClient):
        self.client = client

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        return await self.client._make_request(
            "POST",
            ForestAPIEndpoints.AUTH_LOGIN,
            json={"username": username, "password": password},
        )

    async def signup(self, username: str, email: str, password: str) -> Dict[str, Any]:
        return await self.client._make_request(
            "POST",
            ForestAPIEndpoints.AUTH_SIGNUP,
            json={
                "username": username,
                "email": email,
                "password": password,
                "role": "ADMIN",
            },
        )
