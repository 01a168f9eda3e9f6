"""
RIK — API Builder Endpoint Tests
=================================

What:  Routes generated by the path-version and header-version builders,
       exercised over HTTP.
How:   create_app() on a temporary RIK home; HTTPX AsyncClient with
       ASGITransport (no server needed).

What we test:
    ✅ Handlers receive path params and context; status/headers they set are sent
    ✅ Controller errors map to 400 / 404 JSON bodies
    ✅ sub_of nests routes under the parent resource
    ✅ Resource health checks serve healthcheck.yml
    ✅ Header mode dispatches on the version header, latest by default
    ✅ Schema files are attached to the OpenAPI description
"""

import pytest

from rik.main import create_app

ECHO_CONTROLLER = """
from rik.controller import ResourceController
from rik.exceptions import NotFoundError, ValidationError


class Controller(ResourceController):
    async def get(self, request, response, path_params, context):
        if path_params.get("id") == "missing":
            raise NotFoundError(resource=context.resource, resource_id="missing")
        return {
            "version": context.version,
            "resource": context.resource,
            "method": context.method,
            "params": path_params,
        }

    async def post(self, request, response, path_params, context):
        body = await request.json()
        if "name" not in body:
            raise ValidationError(message="Field 'name' is required", field="name")
        response.status_code = 201
        response.headers["Location"] = f"/{context.resource}/1"
        return {"created": body}

    async def delete(self, request, response, path_params, context):
        response.status_code = 204
"""

NESTED_CONTROLLER = """
from rik.controller import ResourceController


class Controller(ResourceController):
    sub_of = "shops"

    async def get(self, request, response, path_params, context):
        return {"params": path_params}
"""


class TestPathVersionBuilder:
    """Tests for routes under /api/{version}/..."""

    @pytest.mark.asyncio
    async def test_collection_and_item_routes(self, make_resource, make_settings, client_for):
        """Collection and item routes should reach the handler with path params and context."""
        make_resource("v1", "widgets", controller_source=ECHO_CONTROLLER)
        app = create_app(make_settings(), configure_logging=False)

        async with client_for(app) as client:
            collection = await client.get("/api/v1/widgets")
            item = await client.get("/api/v1/widgets/42")

        assert collection.status_code == 200
        assert collection.json() == {
            "version": "v1",
            "resource": "widgets",
            "method": "get",
            "params": {},
        }
        assert item.json()["params"] == {"id": "42"}
        assert "X-Request-ID" in item.headers

    @pytest.mark.asyncio
    async def test_status_and_headers_set_by_handler(self, make_resource, make_settings, client_for):
        """Status codes and headers set on the response should be sent."""
        make_resource("v1", "widgets", controller_source=ECHO_CONTROLLER)
        app = create_app(make_settings(), configure_logging=False)

        async with client_for(app) as client:
            created = await client.post("/api/v1/widgets", json={"name": "bolt"})
            deleted = await client.delete("/api/v1/widgets/1")

        assert created.status_code == 201
        assert created.headers["Location"] == "/widgets/1"
        assert created.json() == {"created": {"name": "bolt"}}
        assert deleted.status_code == 204
        assert deleted.content == b""

    @pytest.mark.asyncio
    async def test_undefined_verb_is_not_routed(self, make_resource, make_settings, client_for):
        """A verb the controller does not define should answer 405."""
        make_resource("v1", "widgets", controller_source=ECHO_CONTROLLER)
        app = create_app(make_settings(), configure_logging=False)

        async with client_for(app) as client:
            response = await client.patch("/api/v1/widgets/1", json={})

        assert response.status_code == 405

    @pytest.mark.asyncio
    async def test_controller_errors_become_json_errors(self, make_resource, make_settings, client_for):
        """ValidationError and NotFoundError should render 400 and 404 JSON bodies."""
        make_resource("v1", "widgets", controller_source=ECHO_CONTROLLER)
        app = create_app(make_settings(), configure_logging=False)

        async with client_for(app) as client:
            missing = await client.get("/api/v1/widgets/missing", headers={"X-Request-ID": "req-1"})
            invalid = await client.post("/api/v1/widgets", json={})

        assert missing.status_code == 404
        assert missing.json()["error"] == "not_found"
        assert missing.json()["request_id"] == "req-1"
        assert invalid.status_code == 400
        assert invalid.json()["error"] == "validation_error"
        assert invalid.json()["details"] == {"field": "name"}

    @pytest.mark.asyncio
    async def test_sub_resource_routes_nest_under_parent(self, make_resource, make_settings, client_for):
        """A sub_of resource should only be served under its parent."""
        make_resource("v1", "shops")
        make_resource("v1", "widgets", controller_source=NESTED_CONTROLLER)
        app = create_app(make_settings(), configure_logging=False)

        async with client_for(app) as client:
            collection = await client.get("/api/v1/shops/7/widgets")
            item = await client.get("/api/v1/shops/7/widgets/3")
            flat = await client.get("/api/v1/widgets")

        assert collection.json() == {"params": {"parent_id": "7"}}
        assert item.json() == {"params": {"parent_id": "7", "id": "3"}}
        assert flat.status_code == 404

    @pytest.mark.asyncio
    async def test_versions_are_isolated(self, make_resource, make_settings, client_for):
        """A resource should only be served under its own version."""
        make_resource("v1", "widgets")
        make_resource("v2", "gadgets")
        app = create_app(make_settings(), configure_logging=False)

        async with client_for(app) as client:
            v1 = await client.get("/api/v1/widgets")
            v2 = await client.get("/api/v2/gadgets")
            wrong = await client.get("/api/v2/widgets")

        assert v1.json() == {"resource": "widgets", "version": "v1"}
        assert v2.json() == {"resource": "gadgets", "version": "v2"}
        assert wrong.status_code == 404

    @pytest.mark.asyncio
    async def test_resource_health_check(self, make_resource, make_settings, client_for):
        """healthcheck.yml should be served at .../healthcheck."""
        make_resource("v1", "widgets", healthcheck="""
            liveness:
              path: /ping
        """)
        app = create_app(make_settings(), configure_logging=False)

        async with client_for(app) as client:
            response = await client.get("/api/v1/widgets/healthcheck")

        assert response.status_code == 200
        assert response.json() == {
            "status": "ok",
            "version": "v1",
            "resource": "widgets",
            "checks": {"liveness": {"path": "/ping"}},
        }

    @pytest.mark.asyncio
    async def test_version_customization_wraps_version_router(
        self, make_resource, make_customization, make_settings, client_for
    ):
        """A version's hooks should add routes under that version's prefix."""
        make_resource("v1", "widgets")
        make_customization("""
            def setup_router_before_api(router):
                @router.get("/ping")
                async def ping():
                    return {"pong": "v1"}

            def setup_router_after_api(router):
                pass
        """, version="v1")
        app = create_app(make_settings(), configure_logging=False)

        async with client_for(app) as client:
            response = await client.get("/api/v1/ping")

        assert response.json() == {"pong": "v1"}

    def test_schema_files_documented_in_openapi(self, make_resource, make_settings):
        """Schema files should appear in the OpenAPI description."""
        make_resource("v1", "widgets", controller_source=ECHO_CONTROLLER, schemas={
            "post.request.yml": """
                type: object
                required: [name]
                properties:
                  name: {type: string}
            """,
            "get.response.yml": """
                type: object
            """,
        })
        app = create_app(make_settings(), configure_logging=False)

        paths = app.openapi()["paths"]

        post = paths["/api/v1/widgets"]["post"]
        assert post["requestBody"]["content"]["application/json"]["schema"] == {
            "type": "object",
            "required": ["name"],
            "properties": {"name": {"type": "string"}},
        }
        get = paths["/api/v1/widgets/{id}"]["get"]
        assert get["responses"]["200"]["content"]["application/json"]["schema"] == {"type": "object"}


class TestHeaderVersionBuilder:
    """Tests for routes dispatched by the version header."""

    def _home(self, make_resource):
        for version in ("v1", "v2"):
            make_resource(version, "widgets", controller_source=ECHO_CONTROLLER)
        make_resource("v1", "legacy")

    @pytest.mark.asyncio
    async def test_header_selects_version(self, make_resource, make_settings, client_for):
        """The header should select which version's handler runs."""
        self._home(make_resource)
        app = create_app(make_settings(api_version_mode="header"), configure_logging=False)

        async with client_for(app) as client:
            v1 = await client.get("/api/widgets/5", headers={"api-version": "v1"})
            v2 = await client.get("/api/widgets/5", headers={"api-version": "v2"})

        assert v1.json()["version"] == "v1"
        assert v2.json()["version"] == "v2"
        assert v1.json()["params"] == {"id": "5"}

    @pytest.mark.asyncio
    async def test_missing_header_uses_latest_version(self, make_resource, make_settings, client_for):
        """Without a header, the highest version serving the route should answer."""
        self._home(make_resource)
        app = create_app(make_settings(api_version_mode="header"), configure_logging=False)

        async with client_for(app) as client:
            widgets = await client.get("/api/widgets")
            legacy = await client.get("/api/legacy")

        assert widgets.json()["version"] == "v2"
        assert legacy.json() == {"resource": "legacy", "version": "v1"}

    @pytest.mark.asyncio
    async def test_suffixed_version_is_newer_than_plain_version(
        self, make_resource, make_settings, client_for
    ):
        """A suffixed version should sort after the plain version with the same number."""
        for version in ("v2", "v2-preview"):
            make_resource(version, "widgets", controller_source=ECHO_CONTROLLER)
        app = create_app(make_settings(api_version_mode="header"), configure_logging=False)

        async with client_for(app) as client:
            latest = await client.get("/api/widgets")
            pinned = await client.get("/api/widgets", headers={"api-version": "v2"})

        assert latest.json()["version"] == "v2-preview"
        assert pinned.json()["version"] == "v2"

    @pytest.mark.asyncio
    async def test_unknown_version_is_not_found(self, make_resource, make_settings, client_for):
        """A version that does not serve the route should answer 404."""
        self._home(make_resource)
        app = create_app(make_settings(api_version_mode="header"), configure_logging=False)

        async with client_for(app) as client:
            unknown = await client.get("/api/widgets", headers={"api-version": "v9"})
            not_in_version = await client.get("/api/legacy", headers={"api-version": "v2"})

        assert unknown.status_code == 404
        assert unknown.json()["error"] == "not_found"
        assert "v9" in unknown.json()["message"]
        assert not_in_version.status_code == 404

    @pytest.mark.asyncio
    async def test_custom_version_header(self, make_resource, make_settings, client_for):
        """The configured header name should be honoured."""
        self._home(make_resource)
        app = create_app(
            make_settings(api_version_mode="header", api_version_header="X-Api-Version"),
            configure_logging=False,
        )

        async with client_for(app) as client:
            response = await client.get("/api/widgets", headers={"X-Api-Version": "v1"})

        assert response.json()["version"] == "v1"

    @pytest.mark.asyncio
    async def test_health_check_dispatch(self, make_resource, make_settings, client_for):
        """Health checks should follow the same header dispatch."""
        make_resource("v1", "widgets", healthcheck="probe: one\n")
        make_resource("v2", "widgets", healthcheck="probe: two\n")
        app = create_app(make_settings(api_version_mode="header"), configure_logging=False)

        async with client_for(app) as client:
            latest = await client.get("/api/widgets/healthcheck")
            v1 = await client.get("/api/widgets/healthcheck", headers={"api-version": "v1"})

        assert latest.json()["checks"] == {"probe": "two"}
        assert v1.json()["version"] == "v1"
        assert v1.json()["checks"] == {"probe": "one"}
