"""Tests for the CLI entry point."""

from pathlib import Path
from unittest.mock import patch

import pytest

from commitrelay.main import main, parse_args


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("GITHUB_REPO_OWNER", "GITHUB_REPO_NAME", "GITHUB_TOKEN", "GITHUB_TOKEN_FILE", "BASE_URL"):
        monkeypatch.delenv(key, raising=False)


def test_parse_args_defaults() -> None:
    args = parse_args([])
    assert args.config == Path("config.yaml")
    assert args.check is False


def test_check_ok(monkeypatch: pytest.MonkeyPatch, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setenv("GITHUB_REPO_OWNER", "octo")
    monkeypatch.setenv("GITHUB_REPO_NAME", "hello")
    monkeypatch.setenv("GITHUB_TOKEN", "t")
    monkeypatch.setenv("BASE_URL", "https://n.example.com")
    assert main(["--config", str(tmp_path / "none.yaml"), "--check"]) == 0
    assert "octo/hello" in capsys.readouterr().out


def test_check_missing(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config", str(tmp_path / "none.yaml"), "--check"]) == 1
    assert "GITHUB_TOKEN" in capsys.readouterr().out


def test_runs_server(tmp_path: Path) -> None:
    with patch("commitrelay.webhook.server.run_webhook_server") as mock_run:
        with patch("commitrelay.main.setup_logging"):
            assert main(["--config", str(tmp_path / "none.yaml")]) == 0
    mock_run.assert_called_once()


def test_keyboard_interrupt_exits_cleanly(tmp_path: Path) -> None:
    with patch("commitrelay.webhook.server.run_webhook_server", side_effect=KeyboardInterrupt):
        with patch("commitrelay.main.setup_logging"):
            assert main(["--config", str(tmp_path / "none.yaml")]) == 0
