from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest

from paper_latest import cli
from paper_latest.core.config import Settings, load_settings
from paper_latest.core.errors import IntegrityError
from paper_latest.core.models import DownloadResult, DownloadTarget


def test_defaults():
    args = cli.parse_args(["1.20"])
    assert args.project == "paper"
    assert args.download_type == "application"
    assert args.download_location == "-"
    assert args.color == "auto"
    assert not args.verbose

def test_all_options():
    args = cli.parse_args(["-p", "velocity", "--download-type", "server", "3.3.0", "out.jar", "--color", "never", "-v"])
    assert (args.project, args.download_type, args.version, args.download_location) == (
        "velocity", "server", "3.3.0", "out.jar")
    assert args.color == "never" and args.verbose

def test_version_is_required():
    with pytest.raises(SystemExit):
        cli.parse_args([])

def test_summary_lines():
    target = DownloadTarget.file(Path("paper.jar"))
    done = DownloadResult("paper", "1.20", 12, "paper-1.20-12.jar", target, size=2048)
    assert cli.summary(done) == (
        "Downloaded PaperMC Project 'paper', version '1.20', build '12' (paper-1.20-12.jar, 2.00 KB) to 'paper.jar'")
    skipped = DownloadResult("paper", "1.20", 12, "paper-1.20-12.jar", target, skipped=True)
    assert cli.summary(skipped) == "Latest build already downloaded. Exiting."

def test_console_color_modes():
    assert cli.make_console(Settings(color="never")).no_color
    assert cli.make_console(Settings(color="always")).is_terminal

def test_main_success(tmp_path, capsys):
    dest = tmp_path / "paper.jar"
    result = DownloadResult("paper", "1.20", 12, "paper-1.20-12.jar", DownloadTarget.file(dest), size=10)
    with patch.object(cli.DownloadPipeline, "run", return_value=result) as run:
        assert cli.main(["1.20", str(dest), "--color", "never"]) == 0
    run.assert_called_once_with("paper", "application", "1.20", DownloadTarget.file(dest))
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "build '12'" in captured.err

def test_main_fatal_error_exits_nonzero(tmp_path, capsys):
    err = IntegrityError(b"\x00" * 32, b"\x01" * 32, "paper-1.20-12.jar")
    with patch.object(cli.DownloadPipeline, "run", side_effect=err):
        assert cli.main(["1.20", str(tmp_path / "p.jar"), "--color", "never"]) == 1
    captured = capsys.readouterr()
    assert "Failed digest check" in captured.err
    assert captured.out == ""

def test_main_bad_environment(monkeypatch, capsys):
    monkeypatch.setenv("PAPER_LATEST_TIMEOUT", "soon")
    assert cli.main(["1.20", "p.jar"]) == 2
    assert "PAPER_LATEST_TIMEOUT" in capsys.readouterr().err

def test_load_settings_from_env():
    s = load_settings({
        "PAPER_LATEST_API_BASE": "https://mirror.test/api/v2/",
        "PAPER_LATEST_TIMEOUT": "2.5",
        "PAPER_LATEST_CHUNK_SIZE": "4096",
    })
    assert s.api_base == "https://mirror.test/api/v2"
    assert s.timeout == 2.5
    assert s.chunk_size == 4096

def test_load_settings_defaults():
    s = load_settings({})
    assert s.api_base == "https://papermc.io/api/v2"
    assert s.color == "auto"

@pytest.mark.parametrize("value", ["0", "-1", "many"])
def test_load_settings_rejects_bad_chunk_size(value):
    with pytest.raises(ValueError):
        load_settings({"PAPER_LATEST_CHUNK_SIZE": value})

def test_main_interrupted_exits_130(tmp_path, capsys):
    with patch.object(cli.DownloadPipeline, "run", side_effect=KeyboardInterrupt):
        assert cli.main(["1.20", str(tmp_path / "p.jar"), "--color", "never"]) == 130
    assert "Interrupted by user." in capsys.readouterr().err

@pytest.mark.parametrize("flags, verbose", [([], False), (["-v"], True)])
def test_logging_follows_settings(tmp_path, flags, verbose):
    dest = tmp_path / "paper.jar"
    result = DownloadResult("paper", "1.20", 12, "paper-1.20-12.jar", DownloadTarget.file(dest), size=1)
    with patch.object(cli.DownloadPipeline, "run", return_value=result), \
            patch.object(cli, "setup_logging") as setup:
        assert cli.main(["1.20", str(dest), *flags]) == 0
    setup.assert_called_once_with(verbose=verbose)
