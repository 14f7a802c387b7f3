# ==============================================================================
# API DEPENDENCIES - Dependency Injection
# ==============================================================================
# FastAPI dependencies resolving the services registered by the startup
# ==============================================================================

from __future__ import annotations

from typing import Annotated, Any, AsyncIterator, Dict, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from improved_api.core.exceptions import AuthenticationError, ConfigurationError
from improved_api.core.security import TokenService
from improved_api.database.context import ImprovedDbContext
from improved_api.database.unit_of_work import ImprovedUnitOfWork
from improved_api.mapping.mapper import Mapper
from improved_api.mediator.mediator import ScopedMediator

bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="Please enter JWT with Bearer into field",
    auto_error=False,
)


# ==============================================================================
# SERVICE DEPENDENCIES
# ==============================================================================

def get_context(request: Request) -> ImprovedDbContext:
    """Db context registered by the startup."""
    return request.app.state.context


def get_mapper(request: Request) -> Mapper:
    """Mapper built from the startup's mapping profiles."""
    return request.app.state.mapper


def get_token_service(request: Request) -> Optional[TokenService]:
    """Token service, or None when authentication is off."""
    return getattr(request.app.state, "token_service", None)


ContextDep = Annotated[ImprovedDbContext, Depends(get_context)]
MapperDep = Annotated[Mapper, Depends(get_mapper)]


async def get_unit_of_work(context: ContextDep) -> AsyncIterator[ImprovedUnitOfWork]:
    """
    Request-scoped Unit of Work.

    Rolls back if the route raises; pending changes that were not
    committed by a handler are discarded.
    """
    async with ImprovedUnitOfWork(context) as uow:
        yield uow


UnitOfWorkDep = Annotated[ImprovedUnitOfWork, Depends(get_unit_of_work)]


def get_mediator(
    request: Request,
    unit_of_work: UnitOfWorkDep,
    mapper: MapperDep,
) -> ScopedMediator:
    """Mediator bound to the request's unit of work."""
    return request.app.state.mediator.scoped(unit_of_work, mapper)


MediatorDep = Annotated[ScopedMediator, Depends(get_mediator)]


# ==============================================================================
# AUTHENTICATION DEPENDENCIES
# ==============================================================================

async def require_authenticated_user(
    request: Request,
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
) -> Dict[str, Any]:
    """
    Validate the bearer token and return its claims.

    The claims are also stored on ``request.state.user``.

    Raises:
        AuthenticationError: If the header is missing or the token is invalid
        ConfigurationError: If no token service was registered
    """
    service = get_token_service(request)
    if service is None:
        raise ConfigurationError(
            "Authentication is required but no token service is configured"
        )
    if credentials is None:
        raise AuthenticationError("Not authenticated")

    claims = service.decode_token(credentials.credentials)
    request.state.user = claims
    return claims
