import os

from common.probes import PathCapabilityProbe


def _make_tool(directory, name):
    directory.mkdir(parents=True, exist_ok=True)
    tool = directory / name
    tool.write_text("#!/bin/sh\n")
    tool.chmod(0o755)
    return tool


def test_finds_command_on_path(tmp_path, monkeypatch):
    _make_tool(tmp_path / "bin", "uv")
    monkeypatch.setenv("PATH", str(tmp_path / "bin"))

    probe = PathCapabilityProbe()

    assert probe.is_available("uv")
    assert not probe.is_available("definitely-not-installed")


def test_searches_extra_user_directories(tmp_path, monkeypatch):
    _make_tool(tmp_path / ".local" / "bin", "claude")
    monkeypatch.setenv("PATH", str(tmp_path / "empty"))

    assert not PathCapabilityProbe().is_available("claude")
    probe = PathCapabilityProbe(extra_paths=[tmp_path / ".local" / "bin"])
    assert probe.is_available("claude")
    assert probe.search_path().endswith(os.pathsep + str(tmp_path / ".local" / "bin"))
