from __future__ import annotations

import pytest

from site_auditor.categories import get_category_by_id
from site_auditor.config import DEFAULT_CONFIG, categories_from_config, load_config
from site_auditor.errors import ConfigurationError


def test_defaults_when_no_pyproject(tmp_path):
    config = load_config(tmp_path / "pyproject.toml")
    assert config == DEFAULT_CONFIG
    # A copy, not the module-level dict
    config["exclude"].append("x")
    assert DEFAULT_CONFIG["exclude"] == []


def test_merges_tool_section(tmp_path):
    p = tmp_path / "pyproject.toml"
    p.write_text(
        """
[project]
name = "whatever"

[tool.site_auditor]
max_pages = 25
exclude = ["example.com/admin/*"]

[tool.site_auditor.category_weights]
core = 20
perf = 8
""",
        encoding="utf-8",
    )
    config = load_config(p)
    assert config["max_pages"] == 25
    assert config["concurrency"] == DEFAULT_CONFIG["concurrency"]
    assert config["exclude"] == ["example.com/admin/*"]
    assert config["category_weights"] == {"core": 20, "perf": 8}

    cats = categories_from_config(config)
    assert get_category_by_id("core", cats).weight == 20
    assert sum(c.weight for c in cats) == 100


def test_pyproject_without_section(tmp_path):
    p = tmp_path / "pyproject.toml"
    p.write_text('[project]\nname = "x"\n', encoding="utf-8")
    assert load_config(p) == DEFAULT_CONFIG


def test_broken_toml_falls_back_to_defaults(tmp_path, caplog):
    p = tmp_path / "pyproject.toml"
    p.write_text("[tool.site_auditor\nmax_pages = ", encoding="utf-8")
    assert load_config(p) == DEFAULT_CONFIG
    assert "Failed to load or parse" in caplog.text


def test_default_path_is_cwd(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text(
        "[tool.site_auditor]\nconcurrency = 7\n", encoding="utf-8"
    )
    monkeypatch.chdir(tmp_path)
    assert load_config()["concurrency"] == 7


def test_bad_weight_override_is_rejected():
    config = dict(DEFAULT_CONFIG, category_weights={"core": 99})
    with pytest.raises(ConfigurationError, match="sum to 100"):
        categories_from_config(config)
