import pytest
from helpers.backend import ATTENDANCE, ATTENDED, TOTAL, FakeBackend
from helpers.scheduler import VirtualScheduler

from meeting_dashboard.infrastructure.http.client import BackendClient
from meeting_dashboard.services.notifications import Notifier


@pytest.fixture
def scheduler():
    return VirtualScheduler()


@pytest.fixture
def notifier():
    return Notifier(history_size=100)


@pytest.fixture
def backend():
    return FakeBackend({ATTENDANCE: 120, TOTAL: 1_000_000, ATTENDED: 250_000})


@pytest.fixture
def client(backend):
    return BackendClient(base_url="http://backend.test/", transport=backend.transport)
