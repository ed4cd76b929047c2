"""
Réacteurs : les abonnés du domaine.

- RéacteurVente et RéacteurRéapprovisionnement modifient le stock des
  machines et publient les alertes de seuil qui en découlent
- ObservateurStock se contente de relayer ces alertes vers les
  notifications, sans rien modifier ni republier

Chaque réacteur déclare dans `réactions` les classes d'events qu'il
traite et la méthode correspondante, comme le bootstrap du bus déclare
les handlers par type. Les autres events sont ignorés.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from distributeurs.adapters.notifications import Notification
from distributeurs.domain import events, model
from distributeurs.service_layer.messagebus import Abonné

if TYPE_CHECKING:
    from distributeurs.adapters.notifications import AbstractNotifications
    from distributeurs.service_layer.messagebus import MessageBus
    from distributeurs.service_layer.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


class Réacteur(Abonné):
    """Abonné qui aiguille chaque event vers la méthode prévue pour sa classe."""

    réactions: dict[type[events.Event], str] = {}

    def handle(self, event: events.Event) -> None:
        nom = self.réactions.get(type(event))
        if nom is None:
            logger.debug("%s ignore l'event %s", type(self).__name__, event)
            return
        getattr(self, nom)(event)


# --- Réacteurs avec état ---


class RéacteurVente(Réacteur):
    """
    Applique les ventes au stock des machines.

    Une vente sur une machine inconnue est ignorée. Une vente supérieure
    au stock est refusée et signalée en WARNING aux notifications. Sinon
    le stock est décrémenté, et AlerteStockBas est publiée si la machine
    vient de passer sous le seuil.

    Les events dérivés sont publiés une fois le verrou du registre relâché.
    Avec plusieurs threads, le StockNormal d'un réapprovisionnement peut
    donc atteindre les observateurs avant l'AlerteStockBas de la vente qui
    l'a précédé sur la même machine. L'ordre des modifications de stock,
    lui, est garanti par le verrou.

    Une erreur levée par l'adapter de notifications (SMTP indisponible,
    par exemple) n'est pas rattrapée : elle remonte à l'appelant de
    publish(), comme toute erreur d'abonné. Le stock, lui, est déjà dans
    son état final, et une alerte perdue ainsi n'est pas ré-émise tant que
    la machine reste sous le seuil.
    """

    réactions = {events.Vente: "vendre"}

    def __init__(
        self,
        uow: UnitOfWork,
        bus: MessageBus,
        notifications: AbstractNotifications,
    ):
        self.uow = uow
        self.bus = bus
        self.notifications = notifications

    def vendre(self, event: events.Vente) -> None:
        refus = None
        nouveaux: list[events.Event] = []
        with self.uow:
            machine = self.uow.machines.get(event.id_machine)
            if machine is None:
                logger.debug("Machine inconnue %s, event ignoré : %s", event.id_machine, event)
                return
            try:
                machine.vendre(event.quantité_vendue)
            except model.StockInsuffisant as e:
                refus = e
            else:
                logger.info(
                    "Machine %s : %d unités vendues, stock mis à jour à %d",
                    machine.id, event.quantité_vendue, machine.niveau_stock,
                )
                nouveaux = list(self.uow.collect_new_events())

        if refus is not None:
            self.notifications.send(
                Notification(
                    niveau=logging.WARNING,
                    type_événement=event.type,
                    id_machine=event.id_machine,
                    message=str(refus),
                    quantités={"demandée": refus.demandé, "disponible": refus.disponible},
                )
            )
            return

        for nouvel_event in nouveaux:
            self.bus.publish(nouvel_event)


class RéacteurRéapprovisionnement(Réacteur):
    """
    Applique les réapprovisionnements au stock des machines.

    Publie StockNormal quand une machine signalée en stock bas repasse
    au seuil ou au-dessus. Comme pour RéacteurVente, l'event est publié
    hors du verrou du registre.
    """

    réactions = {events.Réapprovisionnement: "réapprovisionner"}

    def __init__(self, uow: UnitOfWork, bus: MessageBus):
        self.uow = uow
        self.bus = bus

    def réapprovisionner(self, event: events.Réapprovisionnement) -> None:
        with self.uow:
            machine = self.uow.machines.get(event.id_machine)
            if machine is None:
                logger.debug("Machine inconnue %s, event ignoré : %s", event.id_machine, event)
                return
            stock_initial = machine.niveau_stock
            machine.réapprovisionner(event.quantité_ajoutée)
            logger.info(
                "Machine %s réapprovisionnée, stock passé de %d à %d",
                machine.id, stock_initial, machine.niveau_stock,
            )
            nouveaux = list(self.uow.collect_new_events())

        for nouvel_event in nouveaux:
            self.bus.publish(nouvel_event)


# --- Observateur sans état ---


class ObservateurStock(Réacteur):
    """Relaie les alertes de seuil vers les notifications."""

    réactions = {
        events.AlerteStockBas: "alerter",
        events.StockNormal: "informer",
    }

    def __init__(self, notifications: AbstractNotifications):
        self.notifications = notifications

    def alerter(self, event: events.AlerteStockBas) -> None:
        self.notifications.send(
            Notification(
                niveau=logging.WARNING,
                type_événement=event.type,
                id_machine=event.id_machine,
                message=f"Attention : la machine {event.id_machine} est en stock bas !",
            )
        )

    def informer(self, event: events.StockNormal) -> None:
        self.notifications.send(
            Notification(
                niveau=logging.INFO,
                type_événement=event.type,
                id_machine=event.id_machine,
                message=f"Info : le stock de la machine {event.id_machine} est revenu à la normale.",
            )
        )
