import pytest
from PySide6.QtCore import QCoreApplication



@pytest.fixture(scope="session", autouse=True)
def app():
    """One Qt application object for the whole run; QTimer needs it."""
    return QCoreApplication.instance() or QCoreApplication([])


class FakeClock:
    """Manual millisecond clock injected as now_fn."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float):
        self.now += ms


@pytest.fixture
def fake_clock():
    return FakeClock()
