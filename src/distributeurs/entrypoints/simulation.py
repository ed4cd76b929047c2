"""
Simulation de démonstration.

Génère un flux aléatoire de ventes et de réapprovisionnements sur les
machines configurées et le publie sur le message bus. Le générateur
prend un random.Random en paramètre : avec une graine fixée, la
séquence est reproductible.
"""

from __future__ import annotations

import logging
import random
from typing import Sequence

from distributeurs import config
from distributeurs.domain import events
from distributeurs.service_layer import bootstrap, messagebus

logger = logging.getLogger(__name__)

QUANTITÉS_VENTE = (2, 8)
QUANTITÉS_RÉAPPROVISIONNEMENT = (3, 6)


def générer_événement(rng: random.Random, ids_machines: Sequence[str]) -> events.Event:
    """Une vente ou un réapprovisionnement, à chances égales, sur une machine au hasard."""
    if rng.random() < 0.5:
        event = events.Vente(
            id_machine=rng.choice(ids_machines),
            quantité_vendue=rng.choice(QUANTITÉS_VENTE),
        )
    else:
        event = events.Réapprovisionnement(
            id_machine=rng.choice(ids_machines),
            quantité_ajoutée=rng.choice(QUANTITÉS_RÉAPPROVISIONNEMENT),
        )
    logger.debug("Event généré : %s", event)
    return event


def simuler(
    bus: messagebus.MessageBus,
    ids_machines: Sequence[str],
    nombre: int = 5,
    graine: int | None = None,
) -> list[events.Event]:
    """Génère `nombre` events, les publie un par un et les retourne."""
    rng = random.Random(graine)
    générés = [générer_événement(rng, ids_machines) for _ in range(nombre)]
    for event in générés:
        logger.info("Publication de l'event %s pour la machine %s", event.type, event.id_machine)
        bus.publish(event)
    logger.info("Publication des events terminée")
    return générés


def main() -> None:
    logging.basicConfig(
        level=config.get_niveau_log(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ids_machines = config.get_ids_machines()
    registre = bootstrap.créer_registre(ids_machines)
    bus = bootstrap.bootstrap(registre=registre)
    simuler(bus, ids_machines, **config.get_simulation_config())
    for machine in registre:
        logger.info("Machine %s : stock final %d", machine.id, machine.niveau_stock)


if __name__ == "__main__":
    main()
