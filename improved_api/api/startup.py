# ==============================================================================
# IMPROVED STARTUP - Application Bootstrap
# ==============================================================================
# Registers authentication, db context, mediator, mapper, swagger,
# middleware and controllers on a FastAPI application
# ==============================================================================

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Type

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute

from improved_api.api.controllers import ImprovedQueryController
from improved_api.api.dependencies import require_authenticated_user
from improved_api.core.logging_config import configure_logging
from improved_api.core.security import TokenService
from improved_api.core.settings import Settings, get_settings
from improved_api.database.context import ImprovedDbContext
from improved_api.mapping.mapper import Mapper
from improved_api.mapping.profile import Profile
from improved_api.mediator.mediator import Mediator
from improved_api.middleware.error_handling import ErrorHandlingMiddleware
from improved_api.schemas.base import HealthResponse

logger = logging.getLogger(__name__)

SWAGGER_URL = "/swagger"
SWAGGER_JSON_URL = "/swagger/v1/swagger.json"


def generate_operation_id(route: APIRoute) -> str:
    """Operation id ``<tag>_<route name>``, unique across controllers."""
    tag = route.tags[0] if route.tags else "default"
    return f"{tag}_{route.name}"


class ImprovedStartup(ABC):
    """
    Base class wiring an application together.

    Subclass it, fill ``mediator_modules``, ``mapping_profiles`` and
    ``controllers`` in the constructor, implement ``create_context`` and
    call ``create_app()``.

    Attributes:
        swagger_enabled: Serve the OpenAPI document and Swagger UI
        authentication_enabled: Require a bearer token on controllers
            (only effective when TOKEN_CONFIGURATION is present)
        mediator_modules: Dotted module names scanned for request handlers
        mapping_profiles: Profiles loaded into the mapper
        controllers: Controller classes exposed under API_PREFIX

    Example:
        >>> class Startup(ImprovedStartup):
        ...     def __init__(self, settings=None):
        ...         super().__init__(settings)
        ...         self.mediator_modules.append("shop.handlers")
        ...         self.controllers.append(ProductController)
        ...
        ...     def create_context(self):
        ...         return ShopContext(self.settings)
        ...
        >>> app = Startup().create_app()
    """

    swagger_enabled: bool = True
    authentication_enabled: bool = False

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        configure_logging(self.settings)
        self.mediator_modules: List[str] = []
        self.mapping_profiles: List[Profile] = []
        self.controllers: List[Type[ImprovedQueryController]] = []

    @property
    def authentication_active(self) -> bool:
        return self.authentication_enabled and self.settings.TOKEN_CONFIGURATION is not None

    @abstractmethod
    def create_context(self) -> ImprovedDbContext:
        """Build the db context of the application."""

    # ==========================================================================
    # APPLICATION FACTORY
    # ==========================================================================

    def create_app(self) -> FastAPI:
        """
        Create and configure the FastAPI application.

        Returns:
            Configured FastAPI application instance
        """
        docs: Dict[str, Any] = {"docs_url": None, "redoc_url": None, "openapi_url": None}
        if self.swagger_enabled:
            docs = self.add_swagger()

        app = FastAPI(
            title=self.settings.API_TITLE,
            description=self.settings.API_DESCRIPTION,
            version=self.settings.APP_VERSION,
            debug=self.settings.DEBUG,
            lifespan=self.lifespan,
            generate_unique_id_function=generate_operation_id,
            **docs,
        )

        self.configure_services(app)
        self.configure(app)
        return app

    @asynccontextmanager
    async def lifespan(self, app: FastAPI) -> AsyncIterator[None]:
        """Connect the db context on startup, release it on shutdown."""
        logger.info(f"Starting {self.settings.APP_NAME} v{self.settings.APP_VERSION}")
        logger.info(f"Environment: {self.settings.ENVIRONMENT.value}")

        try:
            await app.state.context.connect()
        except Exception as e:
            logger.error(f"Failed to initialize database: {e}")
            if self.settings.is_production:
                raise

        yield

        logger.info("Shutting down application...")
        await app.state.context.disconnect()

    # ==========================================================================
    # SERVICES
    # ==========================================================================

    def configure_services(self, app: FastAPI) -> None:
        """Register every service on ``app.state``."""
        if self.authentication_active:
            self.add_authentication(app)
        else:
            if self.authentication_enabled:
                logger.warning(
                    "Authentication is enabled but the TOKEN_CONFIGURATION section is missing; "
                    "controllers are served without authentication."
                )
            logger.info(
                "If you wish to use token authentication, add the 'TOKEN_CONFIGURATION' "
                "section to your environment with the properties: "
                "TOKEN_CONFIGURATION__SECRET_KEY, TOKEN_CONFIGURATION__AUDIENCE, "
                "TOKEN_CONFIGURATION__ISSUER, TOKEN_CONFIGURATION__SECONDS"
            )

        app.state.settings = self.settings
        app.state.context = self.create_context()
        app.state.mediator = self.add_mediator()
        app.state.mapper = self.add_mapper()

    def add_authentication(self, app: FastAPI) -> None:
        app.state.token_service = TokenService(self.settings.TOKEN_CONFIGURATION)
        logger.info("Bearer token authentication enabled")

    def add_mediator(self) -> Mediator:
        mediator = Mediator()
        if not self.mediator_modules:
            logger.warning(
                "Please, inform the 'mediator_modules' inside the Startup constructor!"
            )
        for module_name in self.mediator_modules:
            mediator.register_module(module_name)
        return mediator

    def add_mapper(self) -> Mapper:
        return Mapper(self.mapping_profiles)

    def add_swagger(self) -> Dict[str, Any]:
        """
        OpenAPI settings for the FastAPI constructor.

        Controller docstrings become the tag descriptions; controllers
        without one are reported.
        """
        tags = []
        for controller in self.controllers:
            doc = (controller.__doc__ or "").strip()
            if not doc:
                logger.warning(
                    f"Please add a docstring to {controller.__module__}.{controller.__name__}; "
                    f"it is used as the description of its section in the API docs."
                )
            for tag in controller.route_tags():
                tags.append({"name": tag, "description": doc.splitlines()[0] if doc else ""})

        return {
            "docs_url": SWAGGER_URL,
            "redoc_url": None,
            "openapi_url": SWAGGER_JSON_URL,
            "openapi_tags": tags or None,
            "terms_of_service": self.settings.API_TERMS_OF_SERVICE,
            "contact": {
                "name": self.settings.API_CONTACT_NAME,
                "url": self.settings.API_CONTACT_URL,
            },
        }

    # ==========================================================================
    # PIPELINE
    # ==========================================================================

    def configure(self, app: FastAPI) -> None:
        """Install middleware, controllers and health endpoints."""
        app.add_middleware(ErrorHandlingMiddleware, debug=self.settings.DEBUG)
        app.add_middleware(
            CORSMiddleware,
            allow_origins=self.settings.CORS_ORIGINS,
            allow_credentials=self.settings.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        for controller in self.controllers:
            self.add_controller(app, controller)

        self.register_health_endpoints(app)

    def add_controller(self, app: FastAPI, controller: Type[ImprovedQueryController]) -> None:
        dependencies = []
        if self.authentication_active and not controller.allow_anonymous:
            dependencies.append(Depends(require_authenticated_user))

        app.include_router(
            controller.build_router(exclude_none=self.settings.JSON_IGNORE_NULLS),
            prefix=self.settings.API_PREFIX,
            dependencies=dependencies,
        )
        logger.debug(
            f"Mapped {controller.__name__} at "
            f"{self.settings.API_PREFIX}/{controller.route_name()}"
        )

    def register_health_endpoints(self, app: FastAPI) -> None:
        """Register health check endpoints."""
        settings = self.settings
        swagger_enabled = self.swagger_enabled

        @app.get(
            "/health",
            response_model=HealthResponse,
            tags=["Health"],
            summary="Health check",
            description="Check application and database health.",
        )
        async def health_check() -> HealthResponse:
            db_healthy = await app.state.context.health_check()
            return HealthResponse(
                status="healthy" if db_healthy else "degraded",
                version=settings.APP_VERSION,
                database="connected" if db_healthy else "disconnected",
            )

        @app.get(
            "/",
            tags=["Health"],
            summary="Root endpoint",
            description="Welcome message and API information.",
        )
        async def root() -> dict:
            return {
                "name": settings.APP_NAME,
                "version": settings.APP_VERSION,
                "docs": SWAGGER_URL if swagger_enabled else "Disabled",
                "health": "/health",
            }
