import pytest

from eco_platform.config import AppSettings
from eco_platform.services.environment_service import EnvironmentService

from fakes import TODAY, FakeClimateClient, FakeImagery


@pytest.fixture
def settings():
    return AppSettings(worker_pool_size=2)


@pytest.fixture
def climate():
    return FakeClimateClient()


@pytest.fixture
def imagery():
    return FakeImagery()


@pytest.fixture
def environment(settings, climate, imagery):
    service = EnvironmentService(settings, client=climate, imagery=imagery, today=lambda: TODAY)
    yield service
    service.close()
