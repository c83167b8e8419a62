"""
Background workers.

ImportConsumer drains csv-import-queue; ChangeNotifier/ChangeSubscriber
broadcast and receive change events on csv-changes-topic.

Dependencies: kombu, csv_processor.boundary
System role: Background processing
"""

from csv_processor.workers.change_notifier import (
    ChangeNotifier,
    ChangeSubscriber,
    EmailAlertHandler,
    log_change_event,
)
from csv_processor.workers.import_consumer import ImportConsumer, decode_import_message

__all__ = [
    "ChangeNotifier",
    "ChangeSubscriber",
    "EmailAlertHandler",
    "ImportConsumer",
    "decode_import_message",
    "log_change_event",
]
