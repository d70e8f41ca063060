"""Unit tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from talentmatch.cli import main


@pytest.fixture
def runner():
    return CliRunner()


@pytest.mark.unit
def test_version(runner):
    result = runner.invoke(main, ["--version"])

    assert result.exit_code == 0
    assert "0.1.0" in result.output


@pytest.mark.unit
def test_jobs_list_local(runner):
    result = runner.invoke(main, ["--local", "jobs", "list"])

    assert result.exit_code == 0
    assert "Sieve" in result.output
    assert "Koodos" in result.output


@pytest.mark.unit
def test_remote_disabled_by_config(runner, isolated_config):
    isolated_config.config["remote"]["enabled"] = False

    result = runner.invoke(main, ["candidates", "list"])

    assert result.exit_code == 0
    assert "Calvin Goah" in result.output


@pytest.mark.unit
def test_jobs_add_local(runner):
    result = runner.invoke(main, ["--local", "jobs", "add", "--title", "Platform", "--description", "Kubernetes"])

    assert result.exit_code == 0
    assert "ID: 4" in result.output


@pytest.mark.unit
def test_candidates_add_rejects_blank_text(runner):
    result = runner.invoke(main, ["--local", "candidates", "add", "--name", " ", "--skills", ""])

    assert result.exit_code == 1
    assert "Error creating candidate" in result.output


@pytest.mark.unit
def test_candidates_search(runner):
    result = runner.invoke(main, ["--local", "candidates", "search", "celena"])

    assert result.exit_code == 0
    assert "Celena Chang" in result.output
    assert "Calvin Goah" not in result.output


@pytest.mark.unit
def test_candidates_search_no_results(runner):
    result = runner.invoke(main, ["--local", "candidates", "search", "nobody"])

    assert result.exit_code == 0
    assert "No candidates matching" in result.output


@pytest.mark.unit
def test_match_run_local_shows_scores_in_order(runner):
    result = runner.invoke(main, ["--local", "match", "run", "1"])

    assert result.exit_code == 0
    assert "local" in result.output
    assert result.output.index("0.911") < result.output.index("0.896") < result.output.index("0.889")


@pytest.mark.unit
def test_match_run_unknown_job(runner):
    result = runner.invoke(main, ["--local", "match", "run", "99"])

    assert result.exit_code == 0
    assert "No matches found" in result.output


@pytest.mark.unit
def test_match_run_invalid_k(runner):
    result = runner.invoke(main, ["--local", "match", "run", "1", "--top-k", "0"])

    assert result.exit_code == 1
    assert "Error running match" in result.output


@pytest.mark.unit
def test_match_run_export_json(runner, tmp_path):
    output = tmp_path / "matches.json"

    result = runner.invoke(main, ["--local", "match", "run", "3", "-k", "2",
                                  "--export", str(output), "--format", "json"])

    assert result.exit_code == 0
    data = json.loads(output.read_text())
    assert [m["candidate_id"] for m in data["matches"]] == ["1", "2"]


@pytest.mark.unit
def test_match_text(runner):
    result = runner.invoke(main, [
        "match", "text", "Backend Engineer Go Postgres",
        "-c", "1=Go Postgres expert",
        "-c", "2=Frontend React only",
        "-c", "3=Go developer, some Postgres",
        "-k", "2",
    ])

    assert result.exit_code == 0
    assert result.output.index("0.902") < result.output.index("0.760")
    assert "0.714" not in result.output


@pytest.mark.unit
def test_match_text_rejects_malformed_candidate(runner):
    result = runner.invoke(main, ["match", "text", "job", "-c", "no-separator"])

    assert result.exit_code == 2
    assert "ID=TEXT" in result.output


@pytest.mark.unit
def test_encode(runner):
    result = runner.invoke(main, ["encode", "a"])

    assert result.exit_code == 0
    assert "64 dimensions" in result.output
    assert "[1.0000, 0.0000" in result.output


@pytest.mark.unit
def test_encode_empty_text_fails(runner):
    result = runner.invoke(main, ["encode", "   "])

    assert result.exit_code == 1
    assert "Error encoding text" in result.output


@pytest.mark.unit
def test_config_set_and_validate(runner, isolated_config):
    result = runner.invoke(main, ["config", "set", "matching", "top_k", "5"])

    assert result.exit_code == 0
    assert isolated_config.get("matching", "top_k") == 5

    result = runner.invoke(main, ["config", "validate"])
    assert "validation passed" in result.output


@pytest.mark.unit
def test_config_set_rejects_wrong_type(runner, isolated_config):
    result = runner.invoke(main, ["config", "set", "matching", "top_k", "many"])

    assert result.exit_code == 0
    assert "Invalid int value" in result.output
    assert isolated_config.get("matching", "top_k") == 3


@pytest.mark.unit
def test_config_show_unknown_section(runner):
    result = runner.invoke(main, ["config", "show", "--section", "nope"])

    assert "not found" in result.output


@pytest.mark.unit
def test_config_reset_with_confirm(runner, isolated_config):
    isolated_config.config["matching"]["top_k"] = 8

    result = runner.invoke(main, ["config", "reset", "--confirm"])

    assert result.exit_code == 0
    assert isolated_config.get("matching", "top_k") == 3


@pytest.mark.unit
def test_status_local(runner):
    result = runner.invoke(main, ["--local", "status"])

    assert result.exit_code == 0
    assert "Disabled" in result.output
    assert "character-hash" in result.output


@pytest.mark.unit
def test_match_run_local_flag_on_command(runner):
    result = runner.invoke(main, ["match", "run", "1", "--local"])

    assert result.exit_code == 0
    assert "(local)" in result.output
    assert result.output.index("0.911") < result.output.index("0.896")


@pytest.mark.unit
def test_match_text_without_candidates_ranks_store(runner):
    result = runner.invoke(main, [
        "match", "text", "Sieve Product involving SDK development; uses Next.js, Python, Redis.",
        "--local",
    ])

    assert result.exit_code == 0
    assert "Alonso Koumba" in result.output
    assert result.output.index("0.911") < result.output.index("0.896") < result.output.index("0.889")


@pytest.mark.unit
def test_match_text_without_candidates_exports(runner, tmp_path):
    result = runner.invoke(main, ["--local", "match", "text", "Go Postgres", "-k", "1", "--format", "json"])

    assert result.exit_code == 0
    exported = list(tmp_path.glob("talentmatch_description_*.json"))
    assert len(exported) == 1
    data = json.loads(exported[0].read_text())
    assert data["export_info"]["job_id"] is None
    assert len(data["matches"]) == 1


@pytest.mark.unit
def test_match_text_blank_description_fails(runner):
    result = runner.invoke(main, ["--local", "match", "text", "  "])

    assert result.exit_code == 1
    assert "Error matching text" in result.output
