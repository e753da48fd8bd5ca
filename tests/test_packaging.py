from pathlib import Path

from setuptools import find_namespace_packages

ROOT = Path(__file__).resolve().parent.parent


def test_every_subpackage_is_installed() -> None:
    packages = find_namespace_packages(where=str(ROOT), include=["admin_console*"])
    for name in ("admin_console.core", "admin_console.services", "admin_console.utils",
                 "admin_console.api.routes", "admin_console.db", "admin_console.schemas"):
        assert name in packages


def test_pyproject_declares_namespace_discovery() -> None:
    pyproject = (ROOT / "pyproject.toml").read_text()
    assert "namespaces = true" in pyproject
    assert "SPEC_FULL.md" not in pyproject
