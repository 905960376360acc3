from configure.shell_configurator import StarshipConfigStep, StarshipInstallStep, ZshrcInitStep
from provisioner.sequencer import ProvisioningSequencer

INIT_LINE = 'eval "$(starship init zsh)"'


def test_starship_install_command(context, mocker):
    mock_remote = mocker.patch("installer.remote_installer_step.run_remote_installer")
    step = StarshipInstallStep(context)

    step.apply()

    mock_remote.assert_called_once_with(
        "https://starship.rs/install.sh",
        context.app_settings,
        interpreter=("sh", "-s", "--", "--yes"),
        curl_flags="-sS",
        elevated=True,
        current_logger=step.logger,
    )


def test_starship_config_written_once(context):
    step = StarshipConfigStep(context)
    assert step.config_path == context.home_dir / ".config" / "starship.toml"

    ProvisioningSequencer(context).execute([step])
    second = ProvisioningSequencer(context).execute([step])

    assert "[git_branch]" in step.config_path.read_text()
    assert second.results[0].status.value == "satisfied"


def test_starship_config_backs_up_user_edits(context):
    step = StarshipConfigStep(context)
    step.config_path.parent.mkdir(parents=True)
    step.config_path.write_text("format = '$all'\n")

    step.apply()

    backups = list(step.config_path.parent.glob("starship.toml.bak.*"))
    assert len(backups) == 1
    assert backups[0].read_text() == "format = '$all'\n"


def test_zshrc_init_line_never_duplicated(context):
    zshrc = context.home_dir / ".zshrc"
    zshrc.write_text("export PATH=$HOME/.local/bin:$PATH\n")
    step = ZshrcInitStep(context)

    for _ in range(3):
        ProvisioningSequencer(context).execute([step])

    assert zshrc.read_text().count("starship init zsh") == 1
    assert zshrc.read_text().endswith(INIT_LINE + "\n")


def test_zshrc_created_when_missing(context):
    ZshrcInitStep(context).apply()
    assert (context.home_dir / ".zshrc").read_text() == INIT_LINE + "\n"
