# ==============================================================================
# GENERIC CONTROLLERS - Conventional CRUD Routes
# ==============================================================================
# Query controller: GET list / GET by id through a repository
# Record controller: adds POST / PUT / DELETE through the mediator
# ==============================================================================

import re
from typing import Annotated, Any, ClassVar, Dict, List, Optional, Sequence, Type

from fastapi import APIRouter, Path, Query, Request, status
from pydantic import BaseModel

from improved_api.api.dependencies import MapperDep, MediatorDep, UnitOfWorkDep
from improved_api.core.exceptions import BadRequestError, ConfigurationError, NotFoundError
from improved_api.database.repositories import ImprovedRepository
from improved_api.mediator.commands import CreateCommand, DeleteCommand, UpdateCommand
from improved_api.schemas.base import APIResponse, PaginatedResponse


# SQLite integers are signed 64-bit
SQL_INT_MIN = -(2 ** 63)
SQL_INT_MAX = 2 ** 63 - 1
MAX_PAGE_SIZE = 100
MAX_PAGE = SQL_INT_MAX // MAX_PAGE_SIZE


def _snake_case(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


class ImprovedQueryController:
    """
    Read-only controller for one entity.

    Subclasses set the repository and view model; the route defaults to
    the class name without the ``Controller`` suffix.

    Attributes:
        repository: Repository class used for reads
        view_model: Pydantic response model
        route: Route segment under the API prefix
        tags: OpenAPI tags
        filter_fields: Columns accepted as list query parameters
        allow_anonymous: Skip the global authentication requirement

    Example:
        >>> class ToOneController(ImprovedQueryController):
        ...     repository = ToOneRepository
        ...     view_model = ToOneViewModel
        ...
        >>> app.include_router(ToOneController.build_router(), prefix="/api")
    """

    repository: ClassVar[Type[ImprovedRepository]]
    view_model: ClassVar[Type[BaseModel]]
    route: ClassVar[Optional[str]] = None
    tags: ClassVar[Optional[List[str]]] = None
    filter_fields: ClassVar[Sequence[str]] = ()
    allow_anonymous: ClassVar[bool] = False

    # ==========================================================================
    # CONFIGURATION
    # ==========================================================================

    @classmethod
    def route_name(cls) -> str:
        if cls.route:
            return cls.route.strip("/")
        name = cls.__name__
        return name[: -len("Controller")] if name.endswith("Controller") else name

    @classmethod
    def route_tags(cls) -> List[str]:
        return list(cls.tags) if cls.tags else [cls.route_name()]

    @classmethod
    def entity_name(cls) -> str:
        return cls.repository.model.__name__

    @classmethod
    def key_type(cls) -> Any:
        """Python type of the entity's primary key."""
        column = cls.repository.model.__mapper__.primary_key[0]
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return str
        if python_type is int:
            return Annotated[int, Path(ge=SQL_INT_MIN, le=SQL_INT_MAX)]
        return python_type

    @classmethod
    def parse_filters(cls, request: Request) -> Dict[str, Any]:
        """
        Read the configured filter fields from the query string.

        Raises:
            BadRequestError: If a value cannot be converted to the column type
        """
        columns = cls.repository.model.__table__.columns
        filters: Dict[str, Any] = {}
        for name in cls.filter_fields:
            if name not in request.query_params:
                continue
            raw = request.query_params[name]
            try:
                value = columns[name].type.python_type(raw)
            except (NotImplementedError, KeyError):
                value = raw
            except ValueError:
                raise BadRequestError(
                    message=f"Invalid value for filter '{name}'",
                    details={"field": name, "value": raw},
                )
            if isinstance(value, int) and not SQL_INT_MIN <= value <= SQL_INT_MAX:
                raise BadRequestError(
                    message=f"Value for filter '{name}' is out of range",
                    details={"field": name, "value": raw},
                )
            filters[name] = value
        return filters

    @classmethod
    def validate(cls) -> None:
        """
        Raises:
            ConfigurationError: If a required class attribute is missing
        """
        for attribute in ("repository", "view_model"):
            if getattr(cls, attribute, None) is None:
                raise ConfigurationError(
                    f"{cls.__name__} must define '{attribute}'"
                )

    # ==========================================================================
    # ROUTER
    # ==========================================================================

    @classmethod
    def build_router(cls, exclude_none: bool = True) -> APIRouter:
        """Create the router with every route of this controller."""
        cls.validate()
        router = APIRouter(prefix=f"/{cls.route_name()}", tags=cls.route_tags())
        cls.add_query_routes(router, exclude_none)
        return router

    @classmethod
    def add_query_routes(cls, router: APIRouter, exclude_none: bool) -> None:
        repository_class = cls.repository
        view_model = cls.view_model
        key_type = cls.key_type()
        name = cls.entity_name()
        snake = _snake_case(name)
        list_response = APIResponse[PaginatedResponse[view_model]]
        item_response = APIResponse[view_model]

        async def get_all(
            request: Request,
            unit_of_work: UnitOfWorkDep,
            mapper: MapperDep,
            page: int = Query(1, ge=1, le=MAX_PAGE, description="Page number (1-indexed)"),
            page_size: int = Query(10, ge=1, le=MAX_PAGE_SIZE, description="Items per page"),
            sort_by: Optional[str] = Query(None, description="Field to sort by"),
            sort_order: str = Query("asc", pattern="^(asc|desc)$", description="Sort direction"),
        ):
            filters = cls.parse_filters(request)
            repository = unit_of_work.repository(repository_class)
            items = await repository.get_all(
                skip=(page - 1) * page_size,
                limit=page_size,
                filters=filters,
                sort_by=sort_by,
                sort_order=sort_order,
            )
            total = await repository.count(filters)
            return list_response.ok(
                data=PaginatedResponse[view_model].create(
                    items=mapper.map_many(items, view_model),
                    total=total,
                    page=page,
                    page_size=page_size,
                ),
            )

        async def get_by_id(
            id: key_type,
            unit_of_work: UnitOfWorkDep,
            mapper: MapperDep,
        ):
            entity = await unit_of_work.repository(repository_class).get_by_id(id)
            if entity is None:
                raise NotFoundError(
                    message=f"{name} not found",
                    resource_type=name,
                    resource_id=id,
                )
            return item_response.ok(data=mapper.map(entity, view_model))

        description = f"List {name} records with pagination and sorting."
        if cls.filter_fields:
            description += f" Filter fields: {', '.join(cls.filter_fields)}."

        router.add_api_route(
            "",
            get_all,
            methods=["GET"],
            name=f"get_all_{snake}",
            response_model=list_response,
            response_model_exclude_none=exclude_none,
            summary=f"List {name}",
            description=description,
        )
        router.add_api_route(
            "/{id}",
            get_by_id,
            methods=["GET"],
            name=f"get_{snake}",
            response_model=item_response,
            response_model_exclude_none=exclude_none,
            summary=f"Get {name} by id",
            responses={404: {"description": f"{name} not found"}},
        )


class ImprovedController(ImprovedQueryController):
    """
    Full CRUD controller.

    Writes are sent through the mediator as commands; the handlers own
    the repository calls and the commit.

    Attributes:
        create_command: Body model for POST
        update_command: Body model for PUT
        delete_command: Command sent for DELETE
    """

    create_command: ClassVar[Type[CreateCommand]]
    update_command: ClassVar[Type[UpdateCommand]]
    delete_command: ClassVar[Type[DeleteCommand]]

    @classmethod
    def validate(cls) -> None:
        super().validate()
        for attribute in ("create_command", "update_command", "delete_command"):
            if getattr(cls, attribute, None) is None:
                raise ConfigurationError(
                    f"{cls.__name__} must define '{attribute}'"
                )

    @classmethod
    def build_router(cls, exclude_none: bool = True) -> APIRouter:
        router = super().build_router(exclude_none)
        cls.add_command_routes(router, exclude_none)
        return router

    @classmethod
    def add_command_routes(cls, router: APIRouter, exclude_none: bool) -> None:
        view_model = cls.view_model
        create_command = cls.create_command
        update_command = cls.update_command
        delete_command = cls.delete_command
        key_type = cls.key_type()
        name = cls.entity_name()
        snake = _snake_case(name)
        item_response = APIResponse[view_model]
        delete_response = APIResponse[Dict[str, Any]]

        async def create(
            command: create_command,
            mediator: MediatorDep,
            mapper: MapperDep,
        ):
            entity = await mediator.send(command)
            return item_response.ok(
                data=mapper.map(entity, view_model),
                message=f"{name} created",
            )

        async def update(
            id: key_type,
            command: update_command,
            mediator: MediatorDep,
            mapper: MapperDep,
        ):
            command.id = id
            entity = await mediator.send(command)
            return item_response.ok(
                data=mapper.map(entity, view_model),
                message=f"{name} updated",
            )

        async def delete(
            id: key_type,
            mediator: MediatorDep,
        ):
            await mediator.send(delete_command(id=id))
            return delete_response.ok(data={"id": id}, message=f"{name} deleted")

        router.add_api_route(
            "",
            create,
            methods=["POST"],
            name=f"create_{snake}",
            status_code=status.HTTP_201_CREATED,
            response_model=item_response,
            response_model_exclude_none=exclude_none,
            summary=f"Create {name}",
            responses={409: {"description": "Constraint violation"}},
        )
        router.add_api_route(
            "/{id}",
            update,
            methods=["PUT"],
            name=f"update_{snake}",
            response_model=item_response,
            response_model_exclude_none=exclude_none,
            summary=f"Update {name}",
            responses={404: {"description": f"{name} not found"}},
        )
        router.add_api_route(
            "/{id}",
            delete,
            methods=["DELETE"],
            name=f"delete_{snake}",
            response_model=delete_response,
            response_model_exclude_none=exclude_none,
            summary=f"Delete {name}",
            responses={404: {"description": f"{name} not found"}},
        )
