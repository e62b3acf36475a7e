"""Unit tests for the parse, validate and search commands."""

from __future__ import annotations

import json
from pathlib import Path

from click.testing import CliRunner

from catalog_search.cli import cli


def _invoke(sample_config: Path, *args: str):
    runner = CliRunner()
    return runner.invoke(cli, ["--quiet", "--config", str(sample_config), *args])


# ---------------------------------------------------------------------------
# parse
# ---------------------------------------------------------------------------


def test_parse_help() -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["parse", "--help"])
    assert result.exit_code == 0
    assert "Parse a search query" in result.output


def test_parse_json(sample_config: Path) -> None:
    result = _invoke(sample_config, "parse", "--format", "json", "price:100..200", "OR", "wireless")
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload == {
        "operator": "OR",
        "terms": [
            {"field": "price", "operator": "range", "value": "100..200"},
            {"field": "text", "operator": "contains", "value": "wireless"},
        ],
    }


def test_parse_json_with_predicate(sample_config: Path) -> None:
    result = _invoke(sample_config, "parse", "-f", "json", "-p", "foo:bar")
    assert result.exit_code == 0
    assert json.loads(result.stdout)["predicate"] == "MatchAll()"


def test_parse_table(sample_config: Path) -> None:
    result = _invoke(sample_config, "parse", "status:published")
    assert result.exit_code == 0
    assert "status" in result.output
    assert "EQUALS" in result.output


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


def test_validate_ok(sample_config: Path) -> None:
    runner = CliRunner()
    result = runner.invoke(cli, ["--config", str(sample_config), "validate", "(a:b)"])
    assert result.exit_code == 0
    assert "Query is valid" in result.output


def test_validate_reports_all_errors(sample_config: Path) -> None:
    result = _invoke(sample_config, "validate", '(title:"abc')
    assert result.exit_code == 1
    assert "Unclosed quote in query" in result.output
    assert "Unmatched parentheses in query" in result.output


def test_validate_uses_configured_length(sample_config: Path) -> None:
    result = _invoke(sample_config, "validate", "x" * 201)
    assert result.exit_code == 1
    assert "Search query too long" in result.output


# ---------------------------------------------------------------------------
# search
# ---------------------------------------------------------------------------


def test_search_json(sample_config: Path) -> None:
    result = _invoke(sample_config, "search", "--format", "json", "status:published")
    assert result.exit_code == 0
    rows = json.loads(result.stdout)
    assert [row["slug"] for row in rows] == ["usb-cable", "wireless-headphones"]
    assert rows[1]["category"] == "audio"
    assert rows[1]["status"] == "published"


def test_search_limit(sample_config: Path) -> None:
    result = _invoke(sample_config, "search", "-f", "json", "--limit", "1", "status:published")
    assert result.exit_code == 0
    assert len(json.loads(result.stdout)) == 1


def test_search_database_override(temp_dir: Path, sample_config: Path) -> None:
    empty_url = f"sqlite:///{temp_dir / 'empty.db'}"
    result = _invoke(sample_config, "--database", empty_url, "search", "status:published")
    assert result.exit_code == 0
    assert "No results" in result.output


def test_search_table(sample_config: Path) -> None:
    result = _invoke(sample_config, "search", "category:electronics")
    assert result.exit_code == 0
    assert "2 results" in result.output
    assert "smart-watch" in result.output


def test_search_invalid_query(sample_config: Path) -> None:
    result = _invoke(sample_config, "search", 'title:"abc')
    assert result.exit_code == 1
    assert "Unclosed quote" in result.output


def test_search_unopenable_database(temp_dir: Path, sample_config: Path) -> None:
    url = f"sqlite:///{temp_dir / 'missing' / 'catalog.db'}"
    result = _invoke(sample_config, "--database", url, "search", "status:published")
    assert result.exit_code == 2
    assert "Catalog error" in result.output
