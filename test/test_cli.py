from __future__ import annotations

import asyncio
import io
import json

import pytest

from site_auditor import cli
from site_auditor.errors import FetchError
from site_auditor.models import AuditResult, CategoryResult, RuleResult


def _result(score: int, crawled_pages: int = 1, errors=None) -> AuditResult:
    return AuditResult(
        url="https://site.test",
        overall_score=score,
        category_results=[
            CategoryResult(
                "core",
                score,
                pass_count=1,
                fail_count=1,
                results=[
                    RuleResult("core-title", "pass", "Title ok", 100, page_url="https://site.test"),
                    RuleResult("core-h1", "fail", "No <h1> heading found", 0, page_url="https://site.test"),
                ],
            )
        ],
        timestamp="2024-05-01T12:00:00+00:00",
        crawled_pages=crawled_pages,
        errors=list(errors or []),
    )


def run(argv):
    out = io.StringIO()
    code = asyncio.run(cli.async_main(argv, stdout=out))
    return code, out.getvalue()


@pytest.fixture(autouse=True)
def _no_pyproject(tmp_path, monkeypatch):
    # Keep config lookups away from the repository's own pyproject.toml.
    monkeypatch.chdir(tmp_path)


def test_audit_passing_score(monkeypatch):
    seen = {}

    async def fake_audit(url, **kwargs):
        seen["url"] = url
        seen.update(kwargs)
        return _result(85)

    monkeypatch.setattr(cli, "audit", fake_audit)
    code, out = run(["audit", "https://site.test", "-c", "core", "--timeout", "5"])
    assert code == cli.EXIT_OK
    assert seen["url"] == "https://site.test"
    assert seen["categories"] == ["core"]
    assert seen["timeout"] == 5.0
    assert "Overall score: 85/100" in out
    assert "- Core " in out
    assert "[FAIL] core-h1" in out
    assert "fix: Use exactly one <h1>" in out
    # Passing rules are only listed with -v
    assert "core-title" not in out


def test_audit_below_threshold(monkeypatch):
    async def fake_audit(url, **kwargs):
        return _result(40)

    monkeypatch.setattr(cli, "audit", fake_audit)
    code, _ = run(["audit", "https://site.test"])
    assert code == cli.EXIT_BELOW_THRESHOLD


def test_threshold_from_config(tmp_path, monkeypatch):
    (tmp_path / "pyproject.toml").write_text(
        "[tool.site_auditor]\npass_threshold = 30\n", encoding="utf-8"
    )

    async def fake_audit(url, **kwargs):
        return _result(40)

    monkeypatch.setattr(cli, "audit", fake_audit)
    code, _ = run(["audit", "https://site.test"])
    assert code == cli.EXIT_OK


def test_fetch_error_exits_2(monkeypatch, capsys):
    async def fake_audit(url, **kwargs):
        raise FetchError(url, "network error: refused")

    monkeypatch.setattr(cli, "audit", fake_audit)
    code, _ = run(["audit", "https://site.test"])
    assert code == cli.EXIT_ERROR
    assert "Failed to fetch https://site.test" in capsys.readouterr().err


def test_malformed_url_exits_2_without_traceback(capsys):
    code, _ = run(["audit", "https://a\x7fb.com/"])
    assert code == cli.EXIT_ERROR
    assert "Error: Failed to fetch" in capsys.readouterr().err


def test_crawl_passes_limits_and_lists_skipped_pages(monkeypatch):
    seen = {}

    async def fake_audit_site(url, **kwargs):
        seen.update(kwargs)
        return _result(90, crawled_pages=3, errors=["https://site.test/x: timed out after 1.0s"])

    monkeypatch.setattr(cli, "audit_site", fake_audit_site)
    code, out = run(
        ["audit", "https://site.test", "--crawl", "--max-pages", "5", "--concurrency", "2"]
    )
    assert code == cli.EXIT_OK
    assert seen["max_pages"] == 5
    assert seen["concurrency"] == 2
    assert seen["crawl_timeout"] is None
    assert "across 3 pages" in out
    assert "--- Pages Skipped ---" in out
    assert "https://site.test/x: timed out" in out


def test_json_to_file(monkeypatch, tmp_path):
    async def fake_audit(url, **kwargs):
        return _result(85)

    monkeypatch.setattr(cli, "audit", fake_audit)
    target = tmp_path / "out" / "report.json"
    code, out = run(["audit", "https://site.test", "--json", str(target)])
    assert code == cli.EXIT_OK
    assert "Full audit report written to" in out
    data = json.loads(target.read_text(encoding="utf-8"))
    assert data["overall_score"] == 85
    assert data["category_results"][0]["results"][1]["rule_id"] == "core-h1"


def test_json_to_stdout_is_pure_json(monkeypatch):
    async def fake_audit(url, **kwargs):
        return _result(85)

    monkeypatch.setattr(cli, "audit", fake_audit)
    code, out = run(["audit", "https://site.test", "--json", "-"])
    assert code == cli.EXIT_OK
    assert json.loads(out)["crawled_pages"] == 1


def test_list_categories():
    code, out = run(["categories"])
    assert code == cli.EXIT_OK
    lines = out.strip().splitlines()
    assert len(lines) == 16
    assert lines[0].startswith("core")


def test_list_categories_with_bad_weights(tmp_path):
    (tmp_path / "pyproject.toml").write_text(
        "[tool.site_auditor.category_weights]\ncore = 50\n", encoding="utf-8"
    )
    code, _ = run(["categories"])
    assert code == cli.EXIT_ERROR


def test_list_rules_filtered():
    code, out = run(["rules", "-c", "mobile"])
    assert code == cli.EXIT_OK
    lines = out.strip().splitlines()
    assert lines
    assert all(line.startswith("mobile-") for line in lines)
    assert "mobile-viewport" in out


def test_requires_a_command():
    with pytest.raises(SystemExit):
        cli._build_parser().parse_args([])
