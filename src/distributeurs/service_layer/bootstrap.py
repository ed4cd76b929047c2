"""
Bootstrap : assemblage de l'application (Composition Root).

Ce module construit le message bus, les réacteurs et leurs
dépendances, puis inscrit chaque réacteur auprès du bus.

C'est le seul endroit de l'application qui connaît les
implémentations concrètes de chaque abstraction.
"""

from __future__ import annotations

from distributeurs import config
from distributeurs.adapters import notifications
from distributeurs.adapters.registre import RegistreMachines
from distributeurs.domain import events, model
from distributeurs.service_layer import handlers, messagebus, unit_of_work


def créer_registre(ids_machines: list[str] | None = None) -> RegistreMachines:
    """Registre initial : une machine au stock initial par id configuré."""
    if ids_machines is None:
        ids_machines = config.get_ids_machines()
    return RegistreMachines(model.Machine(id_machine) for id_machine in ids_machines)


def créer_notifications() -> notifications.AbstractNotifications:
    if config.get_notifications() == "email":
        return notifications.EmailNotifications(
            destination=config.get_destination_alertes(),
            **config.get_smtp_config(),
        )
    return notifications.LoggingNotifications()


def bootstrap(
    registre: RegistreMachines | None = None,
    notifications_adapter: notifications.AbstractNotifications | None = None,
    isoler_handlers: bool | None = None,
) -> messagebus.MessageBus:
    """
    Construit et retourne un MessageBus configuré.

    En production, les valeurs viennent de la configuration.
    En test, on injecte un registre et des fakes via les paramètres.
    """
    if registre is None:
        registre = créer_registre()

    if notifications_adapter is None:
        notifications_adapter = créer_notifications()

    if isoler_handlers is None:
        isoler_handlers = config.get_isoler_handlers()

    bus = messagebus.MessageBus(isoler_handlers=isoler_handlers)
    uow = unit_of_work.UnitOfWork(registre)

    observateur = handlers.ObservateurStock(notifications_adapter)
    abonnements = {
        events.VENTE: [handlers.RéacteurVente(uow, bus, notifications_adapter)],
        events.RÉAPPROVISIONNEMENT: [handlers.RéacteurRéapprovisionnement(uow, bus)],
        events.ALERTE_STOCK_BAS: [observateur],
        events.STOCK_NORMAL: [observateur],
    }
    for type_event, abonnés in abonnements.items():
        for abonné in abonnés:
            bus.subscribe(type_event, abonné)

    return bus
