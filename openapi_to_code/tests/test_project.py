"""
Tests for FastAPI project detection.
"""

from __future__ import annotations

import logging

import pytest

from openapi_to_code.project import is_fastapi_project, project_requirements, requirement_name


class TestRequirementName:
    """Tests for requirement_name"""

    @pytest.mark.parametrize(
        "requirement,expected",
        [
            ("fastapi", "fastapi"),
            ("FastAPI[all]>=0.110", "fastapi"),
            ("fastapi-users==12.0", "fastapi-users"),
            ("Flask_SQLAlchemy", "flask-sqlalchemy"),
            ("  ", ""),
        ],
    )
    def test_requirement_name(self, requirement, expected):
        assert requirement_name(requirement) == expected


class TestFastApiDetection:
    """Tests for is_fastapi_project"""

    def test_pep621_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "svc"\ndependencies = ["fastapi>=0.110", "httpx"]\n')
        assert is_fastapi_project(tmp_path)

    def test_optional_dependency(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[project]\nname = "svc"\n[project.optional-dependencies]\nweb = ["FastAPI"]\n')
        assert is_fastapi_project(tmp_path)

    def test_poetry_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text('[tool.poetry.dependencies]\npython = "^3.12"\nfastapi = "^0.110"\n')
        assert is_fastapi_project(tmp_path)

    def test_requirements_file(self, tmp_path):
        (tmp_path / "requirements-dev.txt").write_text("# web\n-r base.txt\nfastapi==0.110  # pinned\n")
        assert project_requirements(tmp_path) == ["fastapi==0.110"]
        assert is_fastapi_project(tmp_path)

    def test_other_project(self, tmp_path):
        (tmp_path / "requirements.txt").write_text("fastapi-users\nflask\n")
        assert not is_fastapi_project(tmp_path)

    def test_empty_directory(self, tmp_path):
        assert not is_fastapi_project(tmp_path)

    def test_unreadable_pyproject(self, tmp_path):
        (tmp_path / "pyproject.toml").write_text("[project\n")
        (tmp_path / "requirements.txt").write_text("fastapi\n")
        assert is_fastapi_project(tmp_path)

    def test_undecodable_requirements_file(self, tmp_path, caplog):
        (tmp_path / "requirements-dev.txt").write_bytes(b"\xff\xfepytest\n")
        (tmp_path / "requirements.txt").write_text("fastapi\n")
        (tmp_path / "requirements-old.txt").mkdir()
        with caplog.at_level(logging.WARNING, logger="openapi_to_code"):
            assert project_requirements(tmp_path) == ["fastapi"]
        assert "requirements-dev.txt" in caplog.text
        assert "requirements-old.txt" in caplog.text
        assert is_fastapi_project(tmp_path)

    def test_defaults_to_working_directory(self, tmp_path, monkeypatch):
        (tmp_path / "requirements.txt").write_text("fastapi\n")
        monkeypatch.chdir(tmp_path)
        assert is_fastapi_project()
