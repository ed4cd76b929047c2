"""
Adapter pour les notifications.

Ce module fournit une abstraction sur le collaborateur de télémétrie
qui reçoit les résultats du dispatch (alertes de stock bas, retours à
la normale, ventes refusées). Chaque notification est structurée :
niveau, type d'event, id de machine et quantités utiles.
"""

from __future__ import annotations

import abc
import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Notification:
    """
    Notification structurée envoyée au collaborateur de télémétrie.

    `niveau` reprend les niveaux du module logging (logging.WARNING, ...).
    """

    niveau: int
    type_événement: str
    id_machine: str
    message: str
    quantités: dict[str, int] = field(default_factory=dict)


class AbstractNotifications(abc.ABC):
    """Interface abstraite pour les notifications."""

    @abc.abstractmethod
    def send(self, notification: Notification) -> None:
        raise NotImplementedError


class LoggingNotifications(AbstractNotifications):
    """Implémentation par défaut : écrit chaque notification dans les logs."""

    def send(self, notification: Notification) -> None:
        logger.log(
            notification.niveau,
            notification.message,
            extra={
                "type_événement": notification.type_événement,
                "id_machine": notification.id_machine,
                "quantités": notification.quantités,
            },
        )


class EmailNotifications(AbstractNotifications):
    """Implémentation concrète envoyant des emails via SMTP."""

    def __init__(
        self,
        smtp_host: str = "localhost",
        smtp_port: int = 587,
        destination: str = "stock@example.com",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.destination = destination

    def send(self, notification: Notification) -> None:
        sujet = f"[{logging.getLevelName(notification.niveau)}] Machine {notification.id_machine}"
        msg = EmailMessage()
        msg["Subject"] = sujet
        msg["From"] = "distributeurs@example.com"
        msg["To"] = self.destination
        msg.set_content(notification.message)
        with smtplib.SMTP(self.smtp_host, self.smtp_port) as smtp:
            smtp.send_message(msg)
