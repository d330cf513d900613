import pytest

from .logitech_hidpp import fake_hidpp


@pytest.fixture(autouse=True)
def no_sleep(mocker):
    """Retry delays are real sleeps; tests only count them."""
    return mocker.patch("logitech_hidpp.transport.sleep")


@pytest.fixture
def low_level():
    yield fake_hidpp.FakeLowLevel(responses=list(fake_hidpp.r_mouse))
