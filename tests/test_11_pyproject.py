"""Tests for pyproject.toml and package installation."""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path

import pytest

PYPROJECT = Path(__file__).parent.parent / "pyproject.toml"


class TestPackageInstallation:
    """Test that the package is properly installed."""

    def test_version_defined(self):
        import tts_playground

        assert isinstance(tts_playground.__version__, str)
        assert tts_playground.__version__

    def test_core_modules_importable(self):
        from tts_playground.api import routes, schemas
        from tts_playground.console import session
        from tts_playground.core import config, logging, metrics
        from tts_playground.remote import google_tts
        from tts_playground.services import synthesis_service
        from tts_playground.voices import directory, pricing, tiers

        for module in (routes, schemas, session, config, logging, metrics,
                       google_tts, synthesis_service, directory, pricing, tiers):
            assert module is not None

    def test_console_page_is_package_data(self):
        from importlib import resources

        page = resources.files("tts_playground.console").joinpath("static/index.html")
        assert "<title>TTS Playground</title>" in page.read_text(encoding="utf-8")


class TestCLIEntryPoint:
    """Test the CLI entry point."""

    def test_module_help_exits_zero(self):
        result = subprocess.run(
            [sys.executable, "-m", "tts_playground.cli", "--help"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "tts-playground CLI" in result.stdout


class TestPyprojectToml:
    """Test pyproject.toml configuration."""

    def test_pyproject_valid_toml(self):
        tomllib = pytest.importorskip("tomllib")
        data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))

        assert data["project"]["name"] == "tts-playground"
        assert data["project"]["scripts"]["tts-playground"] == "tts_playground.cli:main"

    def test_pyproject_has_dependencies(self):
        tomllib = pytest.importorskip("tomllib")
        data = tomllib.loads(PYPROJECT.read_text(encoding="utf-8"))

        dep_names = [d.split(">=")[0].split("[")[0] for d in data["project"]["dependencies"]]
        for name in ("fastapi", "uvicorn", "pydantic", "pyyaml", "prometheus-client",
                     "google-cloud-texttospeech", "httpx"):
            assert name in dep_names
        assert "pytest" in " ".join(data["project"]["optional-dependencies"]["test"])
