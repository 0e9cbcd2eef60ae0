# src/taskpulse/reminders/delivery.py

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import datetime

from ..core.ports import NotificationDelivery
from .policy import DeliveryRequest

logger = logging.getLogger(__name__)


class LoggingDelivery:
    """
    Default delivery collaborator: records the request in the log.

    Real OS notification services plug in through the NotificationDelivery port.
    """

    def schedule(self, *, task_id: int, title: str, body: str, deliver_at: float) -> None:
        when = datetime.fromtimestamp(deliver_at).astimezone().strftime("%Y-%m-%d %H:%M:%S")
        logger.info("Delivery scheduled task_id=%s at=%s title=%s body=%s", task_id, when, title, body)


class DisabledDelivery:
    def schedule(self, *, task_id: int, title: str, body: str, deliver_at: float) -> None:
        logger.debug("Delivery disabled, dropping request task_id=%s title=%s", task_id, title)


def request_deliveries(delivery: NotificationDelivery, requests: Iterable[DeliveryRequest]) -> int:
    """
    Hand requests to the delivery service, fire-and-forget.

    A failing request is logged and skipped; it never propagates into task/inbox state.
    Returns how many requests the service accepted without raising.
    """
    accepted = 0
    for req in requests:
        try:
            delivery.schedule(
                task_id=req.task_id,
                title=req.title,
                body=req.body,
                deliver_at=req.deliver_at,
            )
            accepted += 1
        except Exception:
            logger.exception("Delivery request failed task_id=%s title=%s", req.task_id, req.title)
    return accepted
