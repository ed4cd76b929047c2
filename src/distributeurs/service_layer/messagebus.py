"""
Message Bus.

Le message bus route chaque event vers les abonnés enregistrés pour
son tag de type (`event.type`).

Fonctionnement :
1. Un event est publié sur le bus
2. Le bus prend une copie de la liste d'abonnés de ce type
3. Chaque abonné est appelé, dans l'ordre d'inscription, sur le
   thread de l'appelant
4. Un abonné peut lui-même publier un event dérivé : celui-ci est
   dispatché entièrement avant que la main ne revienne à l'abonné

Pas de file d'attente : la livraison est synchrone et récursive.
Le graphe des events est acyclique (vente/réappro -> alertes), donc
la récursion est bornée tant que les réacteurs sont corrects.
"""

from __future__ import annotations

import abc
import logging
import threading
from typing import Callable, Union

from distributeurs.domain import events

logger = logging.getLogger(__name__)


class Abonné(abc.ABC):
    """Interface d'un abonné du message bus."""

    @abc.abstractmethod
    def handle(self, event: events.Event) -> None:
        raise NotImplementedError


Handler = Union[Abonné, Callable[[events.Event], None]]


class MessageBus:
    """
    Dispatcher publish/subscribe synchrone.

    Par défaut, une exception levée par un abonné remonte à l'appelant
    de publish() et les abonnés suivants ne sont pas appelés. Avec
    `isoler_handlers=True`, l'erreur est loggée et le dispatch continue.
    """

    def __init__(self, isoler_handlers: bool = False):
        self.isoler_handlers = isoler_handlers
        self._abonnés: dict[str, list[Handler]] = {}
        self._verrou = threading.RLock()

    def subscribe(self, type_event: str, handler: Handler) -> None:
        """Ajoute `handler` en fin de liste pour `type_event`."""
        with self._verrou:
            if type_event not in self._abonnés:
                self._abonnés[type_event] = []
                logger.debug("Création de la liste d'abonnés pour %s", type_event)
            self._abonnés[type_event].append(handler)
        logger.debug("Abonné %r ajouté pour %s", handler, type_event)

    def unsubscribe(self, type_event: str, handler: Handler) -> None:
        """
        Retire `handler` de la liste de `type_event` (comparaison par identité).

        Sans effet si le type n'a pas de liste ou si le handler n'y est pas.
        Les inscriptions du même handler sous d'autres types sont conservées.
        """
        with self._verrou:
            handlers = self._abonnés.get(type_event)
            if not handlers:
                return
            # Nouvelle liste plutôt que mutation : un publish en cours
            # garde sa propre copie intacte
            self._abonnés[type_event] = [h for h in handlers if h is not handler]

    def abonnés(self, type_event: str) -> list[Handler]:
        """Copie de la liste d'abonnés courante pour `type_event`."""
        with self._verrou:
            return list(self._abonnés.get(type_event, []))

    def publish(self, event: events.Event) -> None:
        """
        Dispatch `event` vers tous les abonnés de son type.

        La liste est figée au début de l'appel : un subscribe ou un
        unsubscribe fait pendant le dispatch ne s'applique qu'aux
        publications suivantes.
        """
        logger.debug("Publication de l'event %s", event)
        for handler in self.abonnés(event.type):
            if self.isoler_handlers:
                try:
                    self._appeler(handler, event)
                except Exception:
                    logger.exception("Erreur lors du traitement de l'event %s par %r", event, handler)
            else:
                self._appeler(handler, event)

    def _appeler(self, handler: Handler, event: events.Event) -> None:
        # Un abonné expose handle() ; une simple fonction est appelée directement
        handle = getattr(handler, "handle", handler)
        handle(event)
