import pytest

from provisioner import config, main_installer
from provisioner.cli_handler import print_banner
from provisioner.config_models import AppSettings
from provisioner.config_loader import ConfigurationError
from provisioner.sequencer import FatalStepError, RunResult, StepResult
from provisioner.base_step import StepStatus


@pytest.fixture
def quiet(mocker, tmp_path):
    mocker.patch("provisioner.main_installer.setup_logging")
    mocker.patch("provisioner.main_installer.check_root")
    return ["--config-file", str(tmp_path / "none.yaml"), "--home-dir", str(tmp_path)]


def test_parse_args_accepts_repeated_skip():
    args = main_installer.parse_args(["--skip", "docker", "--skip", "uv", "--variant", "shell-first"])
    assert args.skip == ["docker", "uv"]
    assert args.variant == "shell-first"


def test_list_steps_does_not_execute(quiet, mocker):
    execute = mocker.patch("provisioner.main_installer.ProvisioningSequencer")
    plan = mocker.patch("provisioner.main_installer.view_step_plan")

    assert main_installer.main(quiet + ["--list-steps"]) == 0

    execute.assert_not_called()
    tags = plan.call_args[0][0]
    assert tags[0] == "refresh_package_index"


def test_successful_run_exits_zero(quiet, mocker):
    sequencer = mocker.patch("provisioner.main_installer.ProvisioningSequencer")
    sequencer.return_value.execute.return_value = RunResult()
    hints = mocker.patch("provisioner.main_installer.print_completion_hints")

    assert main_installer.main(quiet + ["--skip", "docker"]) == 0

    steps = sequencer.return_value.execute.call_args[0][0]
    assert "docker" not in [s.tag for s in steps]
    hints.assert_called_once()


def test_fatal_step_exits_one(quiet, mocker):
    failed = StepResult(tag="docker", name="Install Docker", status=StepStatus.FAILED)
    sequencer = mocker.patch("provisioner.main_installer.ProvisioningSequencer")
    sequencer.return_value.execute.side_effect = FatalStepError(failed, RunResult(results=[failed]))

    assert main_installer.main(quiet) == 1


def test_configuration_error_exits_two(quiet, mocker):
    mocker.patch(
        "provisioner.main_installer.load_app_settings",
        side_effect=ConfigurationError("bad yaml"),
    )
    assert main_installer.main(quiet) == 2


def test_unknown_skip_tag_exits_two(quiet):
    assert main_installer.main(quiet + ["--skip", "no_such_step"]) == 2


def test_banner_logged_before_any_step(quiet, mocker):
    events = []
    mocker.patch(
        "provisioner.main_installer.print_banner",
        side_effect=lambda *a, **k: events.append("banner"),
    )
    sequencer = mocker.patch("provisioner.main_installer.ProvisioningSequencer")
    sequencer.return_value.execute.side_effect = lambda steps: events.append("execute") or RunResult()
    mocker.patch("provisioner.main_installer.print_completion_hints")

    assert main_installer.main(quiet) == 0

    assert events == ["banner", "execute"]


def test_banner_names_version(caplog):
    with caplog.at_level("INFO"):
        banner = print_banner(AppSettings())

    assert f"v{config.SCRIPT_VERSION}" in banner
    assert "Automated Environment Config" in banner
    assert caplog.records[-1].symbol == "🚀"
