from unittest.mock import create_autospec

import pytest

from common.debian.apt_manager import AptManager
from installer.docker_installer import DockerStep
from installer.nodejs_installer import NodejsStep
from installer.python_installer import Python3Step, UvStep


@pytest.fixture
def apt(mocker):
    mock = create_autospec(AptManager, instance=True)
    mocker.patch("installer.base_apt_step.AptManager", return_value=mock)
    return mock


def test_python3_satisfied_by_probe(context, fake_probe):
    step = Python3Step(context)
    assert not step.is_satisfied()
    fake_probe.available.add("python3")
    assert step.is_satisfied()


def test_python3_apply_installs_packages(context, apt):
    apt.install.return_value = True
    assert Python3Step(context).apply() is True
    apt.install.assert_called_once_with(
        ["python3", "python3-pip", "python3-venv"], context.app_settings, update_first=False
    )


def test_uv_installer(context, mocker, fake_probe):
    mock_remote = mocker.patch("installer.remote_installer_step.run_remote_installer")
    step = UvStep(context)

    assert step.requires == ("curl",)
    assert not step.is_satisfied()
    step.apply()

    mock_remote.assert_called_once_with(
        "https://astral.sh/uv/install.sh",
        context.app_settings,
        interpreter=("sh",),
        curl_flags="-LsSf",
        elevated=False,
        current_logger=step.logger,
    )


def test_docker_installer_uses_configured_url(context, mocker, fake_probe):
    context.app_settings.tools.docker_install_url = "https://mirror.example/docker.sh"
    mock_remote = mocker.patch("installer.remote_installer_step.run_remote_installer")

    fake_probe.available.add("docker")
    assert DockerStep(context).is_satisfied()

    DockerStep(context).apply()
    assert mock_remote.call_args[0][0] == "https://mirror.example/docker.sh"


def test_nodejs_satisfied_by_npm(context, fake_probe):
    assert NodejsStep(context).is_satisfied()
    fake_probe.available.discard("npm")
    assert not NodejsStep(context).is_satisfied()


def test_nodejs_apply(context, mocker, apt):
    mock_remote = mocker.patch("installer.nodejs_installer.run_remote_installer")
    apt.install.return_value = True

    assert NodejsStep(context).apply() is True

    mock_remote.assert_called_once_with(
        "https://deb.nodesource.com/setup_lts.x",
        context.app_settings,
        interpreter=("bash", "-"),
        elevated=True,
        preserve_env=True,
        current_logger=mocker.ANY,
    )
    apt.install.assert_called_once_with("nodejs", context.app_settings, update_first=False)


def test_nodejs_setup_script_keeps_environment(context, mocker, apt):
    mocker.patch("os.geteuid", return_value=1000)
    mocker.patch.dict("os.environ", {"https_proxy": "http://proxy.local:3128"})
    mock_run = mocker.patch("common.command_utils.run_command")
    mock_run.return_value = mocker.Mock(stdout="#!/bin/bash\n", returncode=0)
    apt.install.return_value = True

    NodejsStep(context).apply()

    setup_call = mock_run.call_args_list[-1]
    assert setup_call.args[0] == ["sudo", "-E", "bash", "-"]
    assert setup_call.kwargs["env"] is None


def test_nodejs_apply_fails_without_npm(context, mocker, apt, fake_probe):
    mocker.patch("installer.nodejs_installer.run_remote_installer")
    apt.install.return_value = True
    fake_probe.available.discard("npm")

    assert NodejsStep(context).apply() is False
