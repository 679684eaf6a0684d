"""
Dependency injection for FastAPI.
"""
from typing import Annotated, Callable, Optional

from fastapi import Depends, HTTPException, Request

from forest_console.config import settings
from forest_console.domain.registry import get_schema
from forest_console.domain.schema import EntitySchema
from forest_console.domain.session import SessionContext
from forest_console.infrastructure.api_client import ForestAPIClient, get_api_client
from forest_console.infrastructure.gateway import AuthGateway, EntityGateway
from forest_console.services.application.auth_service import AuthService
from forest_console.services.application.view_registry import ViewRegistry, get_view_registry

GatewayFactory = Callable[[EntitySchema, Optional[str]], EntityGateway]


class LoginRequired(Exception):
    """Raised when a console page is opened without a signed-in session."""


def get_gateway_factory(
    api_client: Annotated[ForestAPIClient, Depends(get_api_client)],
) -> GatewayFactory:
    """
    Dependency factory for entity gateways.

    Args:
        api_client: Shared backend client (injected)

    Returns:
        Callable building a gateway for a schema and optional bearer token
    """
    def build(schema: EntitySchema, token: Optional[str] = None) -> EntityGateway:
        return EntityGateway(
            api_client,
            schema,
            token=token if settings.attach_auth_token else None,
        )
    return build


def get_auth_service(
    api_client: Annotated[ForestAPIClient, Depends(get_api_client)],
) -> AuthService:
    """
    Dependency factory for AuthService.

    Args:
        api_client: Shared backend client (injected)

    Returns:
        AuthService instance
    """
    return AuthService(AuthGateway(api_client))


def get_optional_session(request: Request) -> Optional[SessionContext]:
    return SessionContext.from_session(request.session)


def require_session(
    session: Annotated[Optional[SessionContext], Depends(get_optional_session)],
) -> SessionContext:
    """
    The signed-in session.

    Raises:
        LoginRequired: If nobody is signed in; handled by redirecting to /auth
    """
    if session is None:
        raise LoginRequired()
    return session


def get_entity_schema(entity: str) -> EntitySchema:
    """
    Resolve the ``{entity}`` path segment.

    Raises:
        HTTPException: 404 for unknown entities
    """
    try:
        return get_schema(entity)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown section '{entity}'")


# Type aliases for cleaner route signatures
SessionDep = Annotated[SessionContext, Depends(require_session)]
OptionalSessionDep = Annotated[Optional[SessionContext], Depends(get_optional_session)]
SchemaDep = Annotated[EntitySchema, Depends(get_entity_schema)]
GatewayFactoryDep = Annotated[GatewayFactory, Depends(get_gateway_factory)]
ViewRegistryDep = Annotated[ViewRegistry, Depends(get_view_registry)]
AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
