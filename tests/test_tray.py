import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PyQt5.QtCore import QCoreApplication, QEvent, QEventLoop, QTimer  # noqa: E402
from PyQt5.QtWidgets import QApplication, QMenu  # noqa: E402

from tests.conftest import FakeSettings  # noqa: E402

from wattmeter.tray import QtTimerBackend, WattmeterTray  # noqa: E402


@pytest.fixture(scope="module")
def qt_app():
    return QApplication.instance() or QApplication([])


def _run_events(ms):
    loop = QEventLoop()
    QTimer.singleShot(ms, loop.quit)
    loop.exec_()


def test_one_shot_fires_once_and_is_dropped(qt_app):
    timers = QtTimerBackend()
    fired = []
    handle = timers.add_timeout(0, lambda: fired.append(1))
    assert handle.isActive()

    _run_events(50)
    assert fired == [1]
    assert handle not in timers._timers
    # Removing a fired handle is harmless.
    timers.remove(handle)


def test_remove_stops_repeating_timer(qt_app):
    timers = QtTimerBackend()
    fired = []
    handle = timers.add_timeout(0, lambda: fired.append(1), repeat=True)
    _run_events(30)
    assert fired

    timers.remove(handle)
    assert not handle.isActive()
    assert handle not in timers._timers

    count = len(fired)
    _run_events(30)
    assert len(fired) == count


def test_remove_before_fire_cancels(qt_app):
    timers = QtTimerBackend()
    fired = []
    handle = timers.add_timeout(0, lambda: fired.append(1))
    timers.remove(handle)
    timers.remove(handle)
    _run_events(30)
    assert fired == []


def test_menu_rebuild_keeps_one_battery_submenu(qt_app):
    settings = FakeSettings()
    tray = WattmeterTray(settings, lambda: None)
    for _ in range(3):
        tray._rebuild_menu()
    QCoreApplication.sendPostedEvents(None, QEvent.DeferredDelete)

    submenus = tray._menu.findChildren(QMenu)
    assert len(submenus) == 1
    assert submenus[0].title() == "Battery"
    tray.detach()
