# tests/conftest.py
import io
import logging
from typing import Iterable

import pytest

from common.probes import CapabilityProbe
from provisioner.config_models import AppSettings
from provisioner.context import ProvisionContext
from provisioner.registry import StepRegistry


class FakeProbe(CapabilityProbe):
    """Reports exactly the commands it was given as available."""

    def __init__(self, available: Iterable[str] = ()):
        self.available = set(available)

    def is_available(self, name: str) -> bool:
        return name in self.available


@pytest.fixture
def app_settings(tmp_path) -> AppSettings:
    return AppSettings(home_dir=tmp_path / "home")


@pytest.fixture
def fake_probe() -> FakeProbe:
    return FakeProbe({"apt-get", "curl", "npm"})


@pytest.fixture
def context(app_settings, fake_probe) -> ProvisionContext:
    home = app_settings.home_dir
    home.mkdir(parents=True, exist_ok=True)
    return ProvisionContext(
        app_settings=app_settings,
        home_dir=home,
        probe=fake_probe,
        logger=logging.getLogger("test_provisioner"),
        input_stream=io.StringIO(""),
    )


@pytest.fixture
def clean_registry():
    """Restore the step registry after a test registers its own steps."""
    saved = StepRegistry.get_all_steps()
    yield StepRegistry
    StepRegistry._registry.clear()
    StepRegistry._registry.update(saved)
