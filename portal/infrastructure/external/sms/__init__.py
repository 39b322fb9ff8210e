"""SMS delivery adapters."""

from portal.infrastructure.external.sms.http_sms_dispatcher import HttpSmsDispatcher
from portal.infrastructure.external.sms.log_only_notification_dispatcher import (
    LogOnlyNotificationDispatcher,
)

__all__ = ["HttpSmsDispatcher", "LogOnlyNotificationDispatcher"]
