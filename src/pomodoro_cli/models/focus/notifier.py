"""Fire-and-forget desktop notifications."""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from plyer import notification

from pomodoro_cli.errors import NotificationError
from pomodoro_cli.utils.logger import get_logger

from .cycling import SessionKind

if TYPE_CHECKING:
    from pomodoro_cli.config import NotificationConfig, NotificationTemplate


class NotificationDispatcher:
    """
    Announces sessions with a desktop notification.

    Every notification is shown from its own daemon thread and nothing is
    reported back; a missing or broken backend is logged and otherwise
    ignored so the countdown never waits on it.
    """

    def __init__(self, config: NotificationConfig):
        self.config = config
        self._logger = get_logger("notifications")

    def dispatch(self, kind: SessionKind) -> threading.Thread | None:
        """Show the notification for a session of *kind* in the background."""
        if not self.config.enabled:
            return None

        template = self.config.for_session(kind)
        thread = threading.Thread(
            target=self._deliver,
            args=(template,),
            name=f"notify-{kind.value}",
            daemon=True,
        )
        thread.start()
        return thread

    def _deliver(self, template: NotificationTemplate) -> None:
        try:
            self.show(template)
        except NotificationError as e:
            self._logger.warning("notification not shown: %s", e)

    def show(self, template: NotificationTemplate) -> None:
        """Show one notification synchronously. Raises NotificationError."""
        try:
            notification.notify(
                title=template.title,
                message=template.body,
                app_name=self.config.app_name,
                app_icon=template.icon,
                timeout=self.config.timeout,
            )
        except Exception as e:
            raise NotificationError(f"{type(e).__name__}: {e}") from e
