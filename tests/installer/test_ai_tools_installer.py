import subprocess
from unittest.mock import MagicMock

from installer.ai_tools_installer import (
    ClaudeCliStep,
    CodexCliStep,
    CursorCliStep,
    GeminiCliStep,
)
from provisioner.base_step import FailurePolicy
from provisioner.sequencer import ProvisioningSequencer


def test_ai_tools_are_optional(context):
    for step_class in (ClaudeCliStep, GeminiCliStep, CodexCliStep, CursorCliStep):
        assert step_class(context).failure_policy == FailurePolicy.WARN_AND_CONTINUE


def test_gemini_gated_on_npm_list(context, mocker):
    mock_run = mocker.patch("installer.ai_tools_installer.run_command")
    mock_run.return_value = MagicMock(returncode=0)
    step = GeminiCliStep(context)

    assert step.is_satisfied()
    assert mock_run.call_args[0][0] == ["npm", "list", "-g", "--depth=0", "@google/gemini-cli"]

    mock_run.return_value = MagicMock(returncode=1)
    assert not step.is_satisfied()


def test_codex_install_failure_is_reported(context, mocker):
    mocker.patch(
        "installer.ai_tools_installer.run_elevated_command",
        side_effect=subprocess.CalledProcessError(1, ["npm"]),
    )
    assert CodexCliStep(context).apply() is False


def test_codex_failure_does_not_stop_run(context, mocker):
    mocker.patch("installer.ai_tools_installer.run_command", return_value=MagicMock(returncode=1))
    mocker.patch(
        "installer.ai_tools_installer.run_elevated_command",
        side_effect=subprocess.CalledProcessError(1, ["npm"]),
    )

    result = ProvisioningSequencer(context).execute([CodexCliStep(context)])

    assert result.succeeded
    assert result.results[0].status.value == "warned"


def test_npm_steps_skipped_without_npm(context, fake_probe, mocker):
    fake_probe.available.discard("npm")
    mock_run = mocker.patch("installer.ai_tools_installer.run_command")

    result = ProvisioningSequencer(context).execute([GeminiCliStep(context)])

    mock_run.assert_not_called()
    assert result.results[0].status.value == "skipped"


def test_claude_and_cursor_piped_to_bash(context, mocker, fake_probe):
    mock_remote = mocker.patch("installer.remote_installer_step.run_remote_installer")

    ClaudeCliStep(context).apply()
    CursorCliStep(context).apply()

    urls = [c[0][0] for c in mock_remote.call_args_list]
    assert urls == ["https://claude.ai/install.sh", "https://cursor.com/install"]
    assert all(c.kwargs["interpreter"] == ("bash",) for c in mock_remote.call_args_list)

    fake_probe.available.add("cursor-agent")
    assert CursorCliStep(context).is_satisfied()
