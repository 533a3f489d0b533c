"""Unit tests for the kuberender CLI."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml
from click.testing import CliRunner

from kuberender.cli import cli
from kuberender.source import ANNOTATION_SOURCE_FILE


@pytest.fixture
def manifests(tmp_path: Path) -> Path:
    (tmp_path / "apps").mkdir()
    (tmp_path / "apps" / "web.yaml").write_text(
        "apiVersion: apps/v1\nkind: Deployment\nmetadata:\n  name: web\n"
        "---\n"
        "apiVersion: v1\nkind: Service\nmetadata:\n  name: web\n  namespace: edge\n"
    )
    (tmp_path / "apps" / "db.yml").write_text("apiVersion: v1\nkind: Secret\nmetadata:\n  name: db\n")
    return tmp_path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("KUBERENDER_LOG_LEVEL", "KUBERENDER_SOURCE_ANNOTATIONS", "KUBERENDER_CACHE_ENABLED"):
        monkeypatch.delenv(var, raising=False)


def _run(*args: str):
    return CliRunner().invoke(cli, list(args))


def test_render_prints_yaml_stream(manifests: Path) -> None:
    result = _run("render", "--root", str(manifests), "apps/*")
    assert result.exit_code == 0, result.output
    docs = list(yaml.safe_load_all(result.output))
    assert [(d["kind"], d["metadata"]["name"]) for d in docs] == [
        ("Secret", "db"),
        ("Deployment", "web"),
        ("Service", "web"),
    ]


def test_render_with_filters_and_namespace(manifests: Path) -> None:
    result = _run(
        "render",
        "--root",
        str(manifests),
        "--kind",
        "Deployment",
        "--kind",
        "Service",
        "--set-namespace",
        "prod",
        "apps/*.yaml",
    )
    assert result.exit_code == 0, result.output
    docs = list(yaml.safe_load_all(result.output))
    assert [d["metadata"]["namespace"] for d in docs] == ["prod", "prod"]


def test_render_with_annotations(manifests: Path) -> None:
    result = _run("render", "--root", str(manifests), "--annotate", "apps/db.yml")
    assert result.exit_code == 0, result.output
    (doc,) = yaml.safe_load_all(result.output)
    assert doc["metadata"]["annotations"][ANNOTATION_SOURCE_FILE] == "apps/db.yml"


def test_no_match_exits_non_zero(manifests: Path) -> None:
    result = _run("render", "--root", str(manifests), "charts/*.yaml")
    assert result.exit_code == 1
    assert "no files matched" in result.output


def test_invalid_environment_is_usage_error(manifests: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KUBERENDER_LOG_LEVEL", "loud")
    result = _run("render", "--root", str(manifests), "apps/*")
    assert result.exit_code == 2
