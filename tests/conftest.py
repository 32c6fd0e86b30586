"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest
from click.testing import CliRunner

# Insert local src directory at the beginning of sys.path
# This ensures that the local umlseed package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of umlseed modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("umlseed"):
        del sys.modules[module_name]

from mdzip_builder import ProjectBuilder  # noqa: E402


@pytest.fixture
def project_builder() -> ProjectBuilder:
    return ProjectBuilder()


@pytest.fixture
def shop_project() -> ProjectBuilder:
    """users(id PK, name, email, role in ('admin','user')) <- orders(id PK, user_id FK, total, created_at)."""
    builder = ProjectBuilder()
    users = builder.add_class("users")
    user_id = builder.add_property(users, "id", "int", primary_key=True)
    builder.add_property(users, "name", "varchar", size="(50)")
    builder.add_property(users, "email", "varchar", nullable=True)
    builder.add_property(users, "role", "char", size="(8)")
    builder.add_check(users, "role", "('admin', 'user')")

    orders = builder.add_class("orders")
    builder.add_property(orders, "id", "int", primary_key=True)
    builder.add_property(orders, "user_id", "int", references=user_id)
    builder.add_property(orders, "total", "decimal")
    builder.add_property(orders, "created_at", "date")
    return builder


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "state" / "store.json"


@pytest.fixture
def cli_runner(tmp_path: Path, store_path: Path, monkeypatch: pytest.MonkeyPatch) -> CliRunner:
    """Runner isolated from the user's global config and store."""
    monkeypatch.setattr("umlseed.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml")
    return CliRunner(
        env={
            "UMLSEED__STORE__PATH": str(store_path),
            "UMLSEED__LOGGING__LEVEL": "WARNING",
        }
    )


@pytest.fixture
def shop_archive(tmp_path: Path, shop_project: ProjectBuilder) -> Path:
    path = tmp_path / "shop.mdzip"
    path.write_bytes(shop_project.build())
    return path
