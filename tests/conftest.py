"""
Configuration partagée pour les tests.

Fournit un registre de trois machines au stock initial, un fake de
notifications qui capture ce qui est envoyé, et un bus assemblé par
le bootstrap avec ces deux dépendances.
"""

import pytest

from distributeurs.adapters.notifications import AbstractNotifications, Notification
from distributeurs.service_layer import bootstrap


class FakeNotifications(AbstractNotifications):
    """Capture les notifications envoyées pour vérification dans les tests."""

    def __init__(self) -> None:
        self.envoyées: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.envoyées.append(notification)


@pytest.fixture
def registre():
    return bootstrap.créer_registre(["001", "002", "003"])


@pytest.fixture
def notifications():
    return FakeNotifications()


@pytest.fixture
def bus(registre, notifications):
    return bootstrap.bootstrap(
        registre=registre,
        notifications_adapter=notifications,
        isoler_handlers=False,
    )
