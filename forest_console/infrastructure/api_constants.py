"""
API endpoint constants and configuration.

This module contains all backend endpoint paths and related constants.
Centralizing these values makes it easy to swap out endpoints or update API versions.
"""
from typing import Any, Dict, Optional, Tuple
from urllib.parse import quote


class ForestAPIEndpoints:
    """Forest management backend endpoint paths."""

    # Auth endpoints
    AUTH_LOGIN = "/auth/login"
    AUTH_SIGNUP = "/auth/signup"

    # Entity endpoints
    COLLECTION = "/{entity}"
    ITEM = "/{entity}/{record_id}"

    # Server-side filter variants, keyed by filter name
    FILTERS = {
        "zone": "/{entity}/zone/{value}",
        "conservation-status": "/{entity}/conservation-status/{value}",
        "health-status": "/{entity}/health-status/{value}",
        "type": "/{entity}/type/{value}",
        "date": "/{entity}/date/{value}",
        "active": "/{entity}/active",
        "medicinal": "/{entity}/medicinal",
        "date-range": "/{entity}/date-range",
    }

    @classmethod
    def collection(cls, entity: str) -> str:
        """Path of an entity collection, e.g. ``/animals``."""
        return cls.COLLECTION.format(entity=entity)

    @classmethod
    def item(cls, entity: str, record_id: int) -> str:
        """Path of a single record, e.g. ``/animals/7``."""
        return cls.ITEM.format(entity=entity, record_id=record_id)

    @classmethod
    def filtered(
        cls,
        entity: str,
        filter_key: str,
        value: Any = None,
    ) -> Tuple[str, Optional[Dict[str, str]]]:
        """
        Build the path and query parameters of a filtered list request.

        Args:
            entity: Entity path segment
            filter_key: Filter name (see ``FILTERS``)
            value: Filter value; a ``(start, end)`` pair for ``date-range``,
                ignored for flag filters

        Returns:
            Tuple of (path, query params or None)

        Raises:
            ValueError: If the filter is unknown
        """
        template = cls.FILTERS.get(filter_key)
        if template is None:
            raise ValueError(f"Unknown filter '{filter_key}' for {entity}")

        if filter_key == "date-range":
            start, end = value
            return template.format(entity=entity), {"startDate": start, "endDate": end}

        if "{value}" in template:
            return template.format(entity=entity, value=quote(str(value), safe="")), None
        return template.format(entity=entity), None


# API Configuration Constants
class APIConstants:
    """General API configuration constants."""

    # HTTP Headers
    CONTENT_TYPE_JSON = "application/json"

    # Status codes the backend uses for malformed payloads
    VALIDATION_STATUS_CODES = (400, 422)
