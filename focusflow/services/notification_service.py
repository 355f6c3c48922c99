# -*- coding: utf-8 -*-

import logging
import random
import shutil
import subprocess
import sys
from typing import Optional

from focusflow.constants import APP_NAME, MOTIVATIONAL_MESSAGES, NOTIFICATION_CONFIG
from focusflow.domain.models import NotificationMessage, TimerMode

logger = logging.getLogger(__name__)


class DesktopNotifier:
    """
    Native desktop notifications.
    Linux: notify-send, macOS: osascript, Windows: plyer.
    Anything else (or a missing tool) counts as permission denied.
    """

    def __init__(self, platform: Optional[str] = None, rng: Optional[random.Random] = None):
        self.platform = platform or sys.platform
        self._rng = rng or random.Random()
        self._granted: Optional[bool] = None

    def request_permission(self) -> bool:
        if self._granted is None:
            self._granted = self._has_channel()
            if not self._granted:
                logger.info("Desktop notifications unavailable on %s", self.platform)
        return self._granted

    def _has_channel(self) -> bool:
        if self.platform.startswith("linux"):
            return shutil.which("notify-send") is not None
        if self.platform == "darwin":
            return shutil.which("osascript") is not None
        if self.platform == "win32":
            try:
                from plyer import notification  # noqa: F401
            except ImportError:
                return False
            return True
        return False

    def show(self, title: str, body: str, icon: str = "focusflow") -> bool:
        if not self.request_permission():
            logger.debug("Skipping notification %r", title)
            return False
        try:
            self._send(title, body, icon)
        except (OSError, subprocess.SubprocessError, NotImplementedError):
            logger.warning("Notification failed", exc_info=True)
            return False
        return True

    def _send(self, title: str, body: str, icon: str) -> None:
        if self.platform.startswith("linux"):
            subprocess.run(
                ["notify-send", "--app-name", APP_NAME, "--icon", icon, title, body],
                check=False,
                timeout=5,
            )
        elif self.platform == "darwin":
            script = f"display notification {_osa_quote(body)} with title {_osa_quote(title)}"
            subprocess.run(["osascript", "-e", script], check=False, timeout=5)
        else:
            from plyer import notification

            notification.notify(title=title, message=body, app_name=APP_NAME, timeout=10)

    def completion_message(self, finished: TimerMode, upcoming: TimerMode) -> NotificationMessage:
        """Pick the notification for a finished interval with a random line about what comes next."""
        base = NOTIFICATION_CONFIG["WORK_COMPLETE" if finished == TimerMode.WORK else "BREAK_COMPLETE"]
        lines = MOTIVATIONAL_MESSAGES.get(upcoming) or [base.body]
        return NotificationMessage(title=base.title, body=self._rng.choice(lines), icon=base.icon)


def _osa_quote(text: str) -> str:
    return '"' + text.replace("\\", "\\\\").replace('"', '\\"') + '"'
