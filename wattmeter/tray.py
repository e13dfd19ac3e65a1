#!/usr/bin/env python3
"""System tray widget showing the battery's instantaneous power draw."""

import logging
import sys

from PyQt5.QtWidgets import (
    QApplication, QSystemTrayIcon, QMenu, QAction, QActionGroup,
)
from PyQt5.QtGui import QIcon, QPainter, QColor, QFont, QPixmap, QPen
from PyQt5.QtCore import QTimer, Qt, QRectF, QFileSystemWatcher

from wattmeter.config import Settings
from wattmeter.core.label import PowerLabel
from wattmeter.core.meter import Wattmeter
from wattmeter.core.scheduler import (
    AttachmentRetry, PeriodicSync, TimerBackend,
)
from wattmeter.core.types import CANDIDATES, DisplayOptions

log = logging.getLogger(__name__)

# Checkable display toggles in the context menu: (settings key, menu text)
_TOGGLES = (
    ("combine-batteries", "Combine Batteries"),
    ("hide-na", "Hide N/A"),
    ("show-minus-sign", "Show Minus Sign"),
    ("pad-single-digit", "Pad Single Digit"),
)


class QtTimerBackend(TimerBackend):
    """TimerBackend on QTimer; callbacks run on the Qt event loop."""

    def __init__(self):
        self._timers = set()

    def add_timeout(self, seconds, callback, repeat=False):
        timer = QTimer()
        timer.setSingleShot(not repeat)
        if repeat:
            timer.timeout.connect(callback)
        else:
            def _fire():
                self._timers.discard(timer)
                callback()
            timer.timeout.connect(_fire)
        self._timers.add(timer)
        timer.start(seconds * 1000)
        return timer

    def remove(self, handle):
        if handle in self._timers:
            self._timers.discard(handle)
            handle.stop()
            handle.deleteLater()


class WattmeterTray(QSystemTrayIcon):
    """Tray icon hosting the power label."""

    def __init__(self, settings: Settings, refresh):
        super().__init__()
        self._settings = settings
        self._refresh = refresh
        self._label = None
        self._battery_menu = None

        self._menu = QMenu()
        self.setContextMenu(self._menu)
        self._rebuild_menu()
        self._settings_handler = settings.connect("changed", self._on_setting_changed)

    # ---- Label hosting ---------------------------------------------------

    def attach(self, label: PowerLabel):
        """Host a label: redraw whenever its text changes."""
        if self._label is not None:
            self._label.unsubscribe(self._update_icon)
        self._label = label
        label.subscribe(self._update_icon)
        self._update_icon(label.text)

    def detach(self):
        if self._label is not None:
            self._label.unsubscribe(self._update_icon)
            self._label = None
        self._settings.disconnect(self._settings_handler)
        self.hide()

    def _update_icon(self, text: str):
        self.setIcon(self._create_icon(text.strip()))
        shown = text.strip() or "Full"
        self.setToolTip(f"Wattmeter\n{shown}")

    @staticmethod
    def _create_icon(text: str):
        """Battery outline with the wattage drawn inside."""
        size = 64
        pixmap = QPixmap(size, size)
        pixmap.fill(Qt.transparent)

        painter = QPainter(pixmap)
        painter.setRenderHint(QPainter.Antialiasing)

        # Battery body and terminal
        body = QRectF(4, 14, 52, 36)
        painter.setPen(QPen(QColor(200, 200, 200), 3))
        painter.setBrush(QColor(40, 40, 40))
        painter.drawRoundedRect(body, 6, 6)
        painter.setPen(Qt.NoPen)
        painter.setBrush(QColor(200, 200, 200))
        painter.drawRoundedRect(QRectF(56, 24, 6, 16), 2, 2)

        if text.startswith("+"):
            text_color = QColor(80, 200, 80)
        elif text in ("⚠", "?"):
            text_color = QColor(255, 180, 60)
        else:
            text_color = QColor(255, 255, 255)

        # Drop the unit; the tooltip carries it.
        number = text[:-1].strip() if text.endswith("W") else text
        if number:
            font_size = 20 if len(number) <= 2 else 15 if len(number) <= 3 else 11
            painter.setPen(text_color)
            painter.setFont(QFont("Sans", font_size, QFont.Bold))
            painter.drawText(body, Qt.AlignCenter, number)

        painter.end()
        return QIcon(pixmap)

    # ---- Menu building ---------------------------------------------------

    def _rebuild_menu(self):
        self._menu.clear()
        # clear() drops the submenu action but not the submenu itself.
        if self._battery_menu is not None:
            self._battery_menu.deleteLater()

        battery_menu = self._menu.addMenu("Battery")
        self._battery_menu = battery_menu
        group = QActionGroup(battery_menu)
        group.setExclusive(True)
        selected = self._settings.get_int("battery")
        choices = ["Automatic"] + list(CANDIDATES)
        for index, name in enumerate(choices):
            action = QAction(name, battery_menu)
            action.setCheckable(True)
            action.setChecked(index == selected)
            action.triggered.connect(
                lambda _checked, i=index: self._settings.set("battery", i)
            )
            group.addAction(action)
            battery_menu.addAction(action)

        self._menu.addSeparator()

        for key, text in _TOGGLES:
            action = QAction(text, self._menu)
            action.setCheckable(True)
            action.setChecked(self._settings.get_boolean(key))
            action.toggled.connect(
                lambda checked, k=key: self._settings.set(k, checked)
            )
            self._menu.addAction(action)

        self._menu.addSeparator()

        refresh_action = QAction("Refresh Now", self._menu)
        refresh_action.triggered.connect(self._refresh)
        self._menu.addAction(refresh_action)

        quit_action = QAction("Quit", self._menu)
        quit_action.triggered.connect(QApplication.quit)
        self._menu.addAction(quit_action)

    def _on_setting_changed(self, key: str):
        # Defer: the change may come from one of this menu's own actions.
        QTimer.singleShot(0, self._rebuild_menu)


class WattmeterApp:
    """Creates and tears down the meter, its timers and the tray icon."""

    def __init__(self, settings: Settings = None):
        self._settings = settings
        self._timers = None
        self._meter = None
        self._tray = None
        self._sync = None
        self._retry = None
        self._watcher = None
        self._interval_handler = None

    def enable(self):
        if self._meter is not None:
            return
        if self._settings is None:
            self._settings = Settings()

        self._timers = QtTimerBackend()
        self._meter = Wattmeter(self._settings)

        self._sync = PeriodicSync(
            self._meter.label,
            self._meter.render,
            lambda: DisplayOptions.from_settings(self._settings).interval_seconds,
            self._timers,
        )
        self._sync.start()
        self._interval_handler = self._settings.connect(
            "changed::interval", lambda _key: self._sync.start()
        )

        self._tray = WattmeterTray(self._settings, self._meter.sync)
        self._retry = AttachmentRetry(self._find_tray, self._on_tray_found, self._timers)
        self._retry.start()

        self._watcher = QFileSystemWatcher([str(self._settings.path)])
        self._watcher.fileChanged.connect(self._on_config_file_changed)

    def disable(self):
        if self._retry is not None:
            self._retry.cancel()
            self._retry = None
        if self._sync is not None:
            self._sync.stop()
            self._sync = None
        if self._interval_handler is not None:
            self._settings.disconnect(self._interval_handler)
            self._interval_handler = None
        if self._tray is not None:
            self._tray.detach()
            self._tray.deleteLater()
            self._tray = None
        if self._meter is not None:
            self._meter.close()
            self._meter = None
        if self._watcher is not None:
            self._watcher.deleteLater()
            self._watcher = None

    def _find_tray(self):
        if QSystemTrayIcon.isSystemTrayAvailable():
            return self._tray
        log.debug("System tray not available yet")
        return None

    def _on_tray_found(self, tray: WattmeterTray):
        tray.attach(self._meter.label)
        tray.show()
        log.info("Attached to the system tray")

    def _on_config_file_changed(self, path: str):
        # Editors that replace the file drop it from the watch list.
        if path not in self._watcher.files():
            self._watcher.addPath(path)
        self._settings.reload()


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = QApplication(sys.argv)
    app.setQuitOnLastWindowClosed(False)
    app.setApplicationName("Wattmeter")

    wattmeter = WattmeterApp()
    wattmeter.enable()
    app.aboutToQuit.connect(wattmeter.disable)
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
