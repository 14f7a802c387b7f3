# ==============================================================================
# MEDIATOR - Request/Handler Dispatch
# ==============================================================================
# Routes commands and queries to handler classes, decoupling controllers
# from business logic
# ==============================================================================

from __future__ import annotations

import importlib
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Any, ClassVar, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from improved_api.core.exceptions import ConfigurationError, HandlerNotFoundError
from improved_api.database.unit_of_work import ImprovedUnitOfWork
from improved_api.mapping.mapper import Mapper

logger = logging.getLogger(__name__)

RequestType = TypeVar("RequestType", bound="Request")
ResponseType = TypeVar("ResponseType")


class Request(BaseModel):
    """Base class for commands and queries sent through the mediator."""


class RequestHandler(ABC, Generic[RequestType, ResponseType]):
    """
    Handles exactly one request type.

    Handlers are instantiated per dispatch with the request-scoped unit
    of work and the application mapper.

    Example:
        >>> class PingHandler(RequestHandler[Ping, str]):
        ...     request_type = Ping
        ...     async def handle(self, request):
        ...         return "pong"
    """

    request_type: ClassVar[Optional[Type[Request]]] = None

    def __init__(self, unit_of_work: ImprovedUnitOfWork, mapper: Mapper) -> None:
        self.unit_of_work = unit_of_work
        self.mapper = mapper

    @abstractmethod
    async def handle(self, request: RequestType) -> ResponseType:
        """Process the request."""


class Mediator:
    """
    Registry of request handlers.

    The application keeps one mediator; each HTTP request gets a
    ``ScopedMediator`` bound to its own unit of work.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[Request], Type[RequestHandler]] = {}

    @property
    def handlers(self) -> Dict[Type[Request], Type[RequestHandler]]:
        return dict(self._handlers)

    def register(self, handler_class: Type[RequestHandler]) -> None:
        """
        Register a handler class.

        Raises:
            ConfigurationError: If the handler has no request type or the
                request type already has a handler
        """
        request_type = handler_class.request_type
        if request_type is None:
            raise ConfigurationError(
                f"{handler_class.__name__} does not declare 'request_type'"
            )
        existing = self._handlers.get(request_type)
        if existing is not None and existing is not handler_class:
            raise ConfigurationError(
                f"{request_type.__name__} is already handled by {existing.__name__}"
            )
        self._handlers[request_type] = handler_class
        logger.debug(f"Registered {handler_class.__name__} for {request_type.__name__}")

    def register_module(self, module_name: str) -> List[Type[RequestHandler]]:
        """
        Import a module and register every concrete handler defined in it.

        Returns:
            The registered handler classes
        """
        module = importlib.import_module(module_name)
        registered = []
        for _, obj in inspect.getmembers(module, inspect.isclass):
            if (
                issubclass(obj, RequestHandler)
                and obj.__module__ == module.__name__
                and obj.request_type is not None
                and not inspect.isabstract(obj)
            ):
                self.register(obj)
                registered.append(obj)

        if not registered:
            logger.warning(f"No request handlers found in module '{module_name}'")
        return registered

    def handler_for(self, request_type: Type[Request]) -> Type[RequestHandler]:
        """
        Resolve the handler class of a request type.

        Raises:
            HandlerNotFoundError: If no handler is registered
        """
        for klass in request_type.__mro__:
            handler = self._handlers.get(klass)
            if handler is not None:
                return handler
        raise HandlerNotFoundError(request_type)

    def scoped(self, unit_of_work: ImprovedUnitOfWork, mapper: Mapper) -> "ScopedMediator":
        return ScopedMediator(self, unit_of_work, mapper)


class ScopedMediator:
    """Mediator bound to one unit of work."""

    def __init__(
        self,
        mediator: Mediator,
        unit_of_work: ImprovedUnitOfWork,
        mapper: Mapper,
    ) -> None:
        self._mediator = mediator
        self.unit_of_work = unit_of_work
        self.mapper = mapper

    async def send(self, request: Request) -> Any:
        """Dispatch a request to its handler and return the handler result."""
        handler_class = self._mediator.handler_for(type(request))
        handler = handler_class(self.unit_of_work, self.mapper)
        logger.debug(f"Dispatching {type(request).__name__} to {handler_class.__name__}")
        return await handler.handle(request)
