# ==============================================================================
# STARTUP TESTS
# ==============================================================================
# Application wiring, API docs, logging of missing configuration, errors
# ==============================================================================

import pytest
from httpx import ASGITransport, AsyncClient
from pydantic import create_model

from improved_api.api import ImprovedController, ImprovedQueryController, ImprovedStartup
from improved_api.core.exceptions import ConfigurationError
from improved_api.schemas import BaseSchema
from foreign_key_example.database import CategoryRepository, ExampleContext, OneRepository
from foreign_key_example.schemas import OneViewModel
from foreign_key_example.startup import Startup


class UndocumentedController(ImprovedQueryController):
    repository = OneRepository
    view_model = OneViewModel
    route = "Undocumented"


class BareStartup(ImprovedStartup):
    def __init__(self, settings):
        super().__init__(settings)
        self.controllers.append(UndocumentedController)

    def create_context(self):
        return ExampleContext(self.settings)


# Two view models sharing a class name, declared in different modules
OneSummary = create_model(
    "SummaryViewModel",
    __base__=BaseSchema,
    __module__="reports.ones",
    one_id=(int, ...),
)
CategorySummary = create_model(
    "SummaryViewModel",
    __base__=BaseSchema,
    __module__="reports.categories",
    category_id=(int, ...),
)


class OneSummaryController(ImprovedQueryController):
    """One summaries."""

    repository = OneRepository
    view_model = OneSummary


class CategorySummaryController(ImprovedQueryController):
    """Category summaries."""

    repository = CategoryRepository
    view_model = CategorySummary


def reachable_properties(document: dict, schema: dict) -> set:
    """Property names reachable from a schema, following $ref."""
    found = set()
    pending = [schema]
    seen = set()
    while pending:
        node = pending.pop()
        if isinstance(node, list):
            pending.extend(node)
            continue
        if not isinstance(node, dict):
            continue
        ref = node.get("$ref")
        if ref is not None:
            if ref not in seen:
                seen.add(ref)
                pending.append(document["components"]["schemas"][ref.rsplit("/", 1)[-1]])
            continue
        found.update(node.get("properties", {}))
        pending.extend(node.values())
    return found


class TestSwagger:
    """OpenAPI document and Swagger UI."""

    @pytest.mark.asyncio
    async def test_swagger_document(self, client: AsyncClient):
        response = await client.get("/swagger/v1/swagger.json")

        assert response.status_code == 200
        document = response.json()
        assert document["info"]["title"] == "Improved Api"
        assert document["info"]["description"] == "An Example how to improve your api"
        assert document["info"]["contact"]["name"] == "Improved API"
        assert "/api/One/{id}" in document["paths"]
        assert "/api/ToOne" in document["paths"]

    @pytest.mark.asyncio
    async def test_operation_ids_are_unique(self, client: AsyncClient):
        document = (await client.get("/swagger/v1/swagger.json")).json()

        operation_ids = [
            operation["operationId"]
            for path in document["paths"].values()
            for operation in path.values()
        ]
        assert len(operation_ids) == len(set(operation_ids))
        assert "Many_get_all_many" in operation_ids

    @pytest.mark.asyncio
    async def test_controller_docstring_as_tag_description(self, client: AsyncClient):
        document = (await client.get("/swagger/v1/swagger.json")).json()

        tags = {tag["name"]: tag["description"] for tag in document["tags"]}
        assert tags["Category"] == "Categories: create, read, update and delete."

    @pytest.mark.asyncio
    async def test_swagger_ui(self, client: AsyncClient):
        response = await client.get("/swagger")
        assert response.status_code == 200
        assert "swagger-ui" in response.text

    @pytest.mark.asyncio
    async def test_swagger_disabled(self, settings):
        app = Startup(settings, swagger_enabled=False).create_app()
        await app.state.context.connect()
        transport = ASGITransport(app=app)

        async with AsyncClient(transport=transport, base_url="http://test") as client:
            assert (await client.get("/swagger")).status_code == 404
            assert (await client.get("/swagger/v1/swagger.json")).status_code == 404
            assert (await client.get("/")).json()["docs"] == "Disabled"

        await app.state.context.disconnect()

    def test_same_named_view_models_kept_apart(self, settings):
        """Test view models with one class name get separate components."""
        startup = BareStartup(settings)
        startup.controllers.extend([OneSummaryController, CategorySummaryController])
        document = startup.create_app().openapi()

        def item_properties(path: str) -> set:
            response = document["paths"][path]["get"]["responses"]["200"]
            schema = response["content"]["application/json"]["schema"]
            return reachable_properties(document, schema)

        one_properties = item_properties("/api/OneSummary/{id}")
        category_properties = item_properties("/api/CategorySummary/{id}")

        assert "one_id" in one_properties
        assert "category_id" not in one_properties
        assert "category_id" in category_properties
        assert "one_id" not in category_properties


class TestConfigurationLogging:
    """Missing configuration is logged, not raised."""

    def test_missing_token_section_logged(self, settings, caplog):
        with caplog.at_level("INFO"):
            app = Startup(settings).create_app()

        assert "TOKEN_CONFIGURATION section is missing" in caplog.text
        assert "TOKEN_CONFIGURATION__SECRET_KEY" in caplog.text
        assert getattr(app.state, "token_service", None) is None

    def test_authentication_disabled(self, auth_settings):
        app = Startup(auth_settings, authentication_enabled=False).create_app()
        assert getattr(app.state, "token_service", None) is None

    def test_authentication_enabled(self, auth_settings):
        app = Startup(auth_settings).create_app()
        assert app.state.token_service is not None

    def test_missing_mediator_modules_logged(self, settings, caplog):
        with caplog.at_level("WARNING"):
            BareStartup(settings).create_app()

        assert "Please, inform the 'mediator_modules'" in caplog.text

    def test_missing_controller_docstring_logged(self, settings, caplog):
        with caplog.at_level("WARNING"):
            BareStartup(settings).create_app()

        assert "Please add a docstring to" in caplog.text
        assert "UndocumentedController" in caplog.text

    def test_incomplete_controller_rejected(self, settings):
        class BrokenController(ImprovedController):
            """Missing commands."""

            repository = OneRepository
            view_model = OneViewModel

        startup = BareStartup(settings)
        startup.controllers.append(BrokenController)

        with pytest.raises(ConfigurationError):
            startup.create_app()


class TestErrorHandling:
    """Unhandled exceptions become JSON responses."""

    @pytest.mark.asyncio
    async def test_unexpected_error(self, app, client: AsyncClient, caplog):
        @app.get("/boom")
        async def boom():
            raise RuntimeError("secret detail")

        with caplog.at_level("ERROR"):
            response = await client.get("/boom")

        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert "secret detail" not in error["message"]
        assert "Unexpected error" in caplog.text

    @pytest.mark.asyncio
    async def test_unexpected_error_debug(self, settings):
        settings = settings.model_copy(update={"DEBUG": True})
        app = Startup(settings).create_app()

        @app.get("/boom")
        async def boom():
            raise RuntimeError("secret detail")

        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json()["error"]["message"] == "secret detail"
