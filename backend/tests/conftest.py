"""
RIK — Test Configuration (conftest.py)
=======================================

What:  Shared pytest fixtures for the entire test suite.
Why:   Every test needs a throwaway RIK home with a few resources in it.
How:   Builders write controller.py / healthcheck.yml / schema files into
       pytest's tmp_path; apps are exercised with HTTPX over ASGITransport.

Fixture Hierarchy:
    rik_home            empty RIK home directory (tmp_path/rik-home)
    ├── make_resource   writes {version}/resources/{name}/...
    ├── make_customization  writes [version/]rik_customization.py
    ├── home_manager    HomeManager initialized on rik_home
    └── make_settings   Settings pointing at rik_home
    client_for          AsyncClient factory for a FastAPI app
"""

import os
import textwrap
from pathlib import Path
from typing import Dict, Optional

import pytest
from httpx import ASGITransport, AsyncClient

# Before any rik import: the settings singleton reads the environment once
os.environ["LOG_LEVEL"] = "WARNING"

from rik.config import ApiSettings, Settings  # noqa: E402
from rik.logger import reset_rik_logger  # noqa: E402
from rik.services.home_manager import HomeManager  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Controller sources
# ══════════════════════════════════════════════════════════════════════════

WIDGETS_CONTROLLER = """
from rik.controller import ResourceController


class Controller(ResourceController):
    async def get(self, request, response, path_params, context):
        return {"resource": context.resource, "version": context.version}
"""


# ══════════════════════════════════════════════════════════════════════════
# RIK home builders
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def rik_home(tmp_path) -> Path:
    root = tmp_path / "rik-home"
    root.mkdir()
    return root


@pytest.fixture
def make_resource(rik_home):
    """
    Writes a resource folder and returns its path.

    Usage:
        make_resource("v1", "widgets")                          default controller
        make_resource("v1", "broken", controller_source=None)   no controller.py
        make_resource("v1", "w", healthcheck="probe: http")     + healthcheck.yml
        make_resource("v1", "w", schemas={"post.request.yml": "type: object"})
    """

    def _make(
        version: str,
        name: str,
        controller_source: Optional[str] = WIDGETS_CONTROLLER,
        healthcheck: Optional[str] = None,
        schemas: Optional[Dict[str, str]] = None,
    ) -> Path:
        resource_dir = rik_home / version / "resources" / name
        resource_dir.mkdir(parents=True, exist_ok=True)
        if controller_source is not None:
            (resource_dir / "controller.py").write_text(textwrap.dedent(controller_source))
        if healthcheck is not None:
            (resource_dir / "healthcheck.yml").write_text(textwrap.dedent(healthcheck))
        if schemas:
            schemas_dir = resource_dir / "schemas"
            schemas_dir.mkdir(exist_ok=True)
            for filename, content in schemas.items():
                (schemas_dir / filename).write_text(textwrap.dedent(content))
        return resource_dir

    return _make


@pytest.fixture
def make_customization(rik_home):
    """Writes rik_customization.py at the root, or inside `version` when given."""

    def _make(source: str, version: Optional[str] = None) -> Path:
        target_dir = rik_home / version if version else rik_home
        target_dir.mkdir(parents=True, exist_ok=True)
        path = target_dir / "rik_customization.py"
        path.write_text(textwrap.dedent(source))
        return path

    return _make


@pytest.fixture
def home_manager(rik_home) -> HomeManager:
    manager = HomeManager()
    manager.initialize(rik_home)
    manager.set_settings(ApiSettings())
    return manager


@pytest.fixture
def make_settings(rik_home):
    """Settings pointing at the test RIK home; keyword arguments override fields."""

    def _make(**overrides) -> Settings:
        values = {"rik_home": str(rik_home), "log_level": "WARNING"}
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def client_for():
    """
    Usage:
        async with client_for(app) as client:
            response = await client.get("/api/v1/widgets")
    """

    def _client(app) -> AsyncClient:
        return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")

    return _client


@pytest.fixture(autouse=True)
def _restore_rik_logger():
    """A test installing a custom logger must not hide `rik` records from the next one."""
    yield
    reset_rik_logger()
