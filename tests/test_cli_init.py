import json
import os
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from voicemark.cli import _get_claude_config_path, handle_init

# --- Tests for Path Resolution ---


def test_get_config_path_windows():
    with patch("platform.system", return_value="Windows"):
        with patch.dict(os.environ, {"APPDATA": "C:\\Users\\Test\\AppData\\Roaming"}):
            path = _get_claude_config_path()
            # Normalize slashes to forward slash for consistent comparison across Windows/Linux runners
            assert str(path).replace("\\", "/") == "C:/Users/Test/AppData/Roaming/Claude/claude_desktop_config.json"


def test_get_config_path_macos():
    with patch("platform.system", return_value="Darwin"):
        with patch("pathlib.Path.home", return_value=Path("/Users/Test")):
            path = _get_claude_config_path()
            assert path.as_posix() == "/Users/Test/Library/Application Support/Claude/claude_desktop_config.json"


def test_get_config_path_linux():
    with patch("platform.system", return_value="Linux"):
        with patch("pathlib.Path.home", return_value=Path("/home/test")):
            assert _get_claude_config_path().as_posix() == "/home/test/.config/Claude/claude_desktop_config.json"


# --- Tests for Init Logic ---


@pytest.fixture
def mock_config_path(tmp_path):
    """Returns a temporary path acting as the Claude config file."""
    d = tmp_path / "Claude"
    d.mkdir()
    return d / "claude_desktop_config.json"


def run_init(config_path, uv_path="/usr/bin/uv", local=False):
    with patch("voicemark.cli._get_claude_config_path", return_value=config_path):
        with patch("shutil.which", return_value=uv_path):
            args = MagicMock()
            args.local = local
            handle_init(args)


def test_init_creates_fresh_config(mock_config_path):
    run_init(mock_config_path)

    assert mock_config_path.exists()

    with open(mock_config_path) as f:
        data = json.load(f)

    cmd = data["mcpServers"]["voicemark"]
    assert cmd["command"] == "uvx"
    assert cmd["args"] == ["--from", "voicemark", "voicemark-mcp"]


def test_init_creates_missing_directory(tmp_path):
    config_path = tmp_path / "nested" / "Claude" / "claude_desktop_config.json"
    run_init(config_path)
    assert config_path.exists()


def test_init_local_uses_current_interpreter(mock_config_path):
    run_init(mock_config_path, local=True)

    with open(mock_config_path) as f:
        cmd = json.load(f)["mcpServers"]["voicemark"]

    assert cmd["command"] == sys.executable
    assert cmd["args"] == ["-m", "voicemark.server"]


def test_init_updates_existing_and_backups(mock_config_path):
    """Test updating a config file that already has other settings."""
    existing_data = {
        "mcpServers": {"existing-tool": {"command": "echo", "args": ["hello"]}},
        "globalShortcut": "Cmd+Space",
    }
    with open(mock_config_path, "w") as f:
        json.dump(existing_data, f)

    run_init(mock_config_path)

    # 1. Verify Backup Created
    backups = list(mock_config_path.parent.glob("*.bak"))
    assert len(backups) == 1

    # 2. Verify Config Updated
    with open(mock_config_path) as f:
        new_data = json.load(f)

    # Old data preserved
    assert "existing-tool" in new_data["mcpServers"]
    assert new_data["globalShortcut"] == "Cmd+Space"
    assert "voicemark" in new_data["mcpServers"]


def test_init_rejects_invalid_json(mock_config_path, capsys):
    mock_config_path.write_text("{not json", encoding="utf-8")

    with pytest.raises(SystemExit):
        run_init(mock_config_path)

    assert "not valid JSON" in capsys.readouterr().err
    assert mock_config_path.read_text(encoding="utf-8") == "{not json"


def test_init_warns_if_uv_missing(mock_config_path, capsys):
    """Test that a warning is printed if uv is not found."""
    run_init(mock_config_path, uv_path=None)

    captured = capsys.readouterr()
    assert "Warning: 'uv' tool not found" in captured.err
    # It should still create the config though
    assert mock_config_path.exists()
