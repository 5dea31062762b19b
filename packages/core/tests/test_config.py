"""Tests for configuration loading."""

from interlens_core.config import load_config


def test_defaults_applied_when_no_config_file(tmp_path, monkeypatch):
    monkeypatch.delenv("INTERLENS_ANALYSIS_API", raising=False)
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["analysis_api"] == "http://localhost:8080"
    assert config["file_extension"] == ".java"
    assert config["context_lines"] == 1
    assert config["line_height"] == 18
    assert config["colors"] == {"main": "#1F6FEB", "alt": "#142A38"}
    assert config["exclude"] == []


def test_config_file_overrides_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv("INTERLENS_ANALYSIS_API", raising=False)
    cfg = tmp_path / ".interlens.yml"
    cfg.write_text("analysis_api: https://analysis.example.org/\nfile_extension: .kt\n")
    config = load_config(config_path=str(cfg))
    assert config["analysis_api"] == "https://analysis.example.org"
    assert config["file_extension"] == ".kt"


def test_colors_merge_key_wise(tmp_path):
    cfg = tmp_path / ".interlens.yml"
    cfg.write_text("colors:\n  main: red\n")
    config = load_config(config_path=str(cfg))
    assert config["colors"] == {"main": "red", "alt": "#142A38"}


def test_empty_config_file(tmp_path):
    cfg = tmp_path / ".interlens.yml"
    cfg.write_text("")
    config = load_config(config_path=str(cfg))
    assert config["context_lines"] == 1


def test_env_overrides_file(tmp_path, monkeypatch):
    cfg = tmp_path / ".interlens.yml"
    cfg.write_text("analysis_api: https://from-file\n")
    monkeypatch.setenv("INTERLENS_ANALYSIS_API", "https://from-env")
    config = load_config(config_path=str(cfg))
    assert config["analysis_api"] == "https://from-env"


def test_cli_overrides_env(tmp_path, monkeypatch):
    monkeypatch.setenv("INTERLENS_ANALYSIS_API", "https://from-env")
    config = load_config(
        config_path=str(tmp_path / "nonexistent.yml"), cli_overrides={"analysis_api": "https://from-cli"}
    )
    assert config["analysis_api"] == "https://from-cli"


def test_none_cli_overrides_ignored(tmp_path):
    cfg = tmp_path / ".interlens.yml"
    cfg.write_text("context_lines: 2\n")
    config = load_config(config_path=str(cfg), cli_overrides={"context_lines": None})
    assert config["context_lines"] == 2


def test_github_token_from_env(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "gh-token")
    config = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    assert config["github_token"] == "gh-token"


def test_containers_are_not_shared(tmp_path):
    """Mutating one config's lists or colors must not affect another."""
    config_a = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_b = load_config(config_path=str(tmp_path / "nonexistent.yml"))
    config_a["exclude"].append("build/")
    config_a["colors"]["main"] = "red"
    assert config_b["exclude"] == []
    assert config_b["colors"]["main"] == "#1F6FEB"
