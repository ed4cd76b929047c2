"""
Pattern Unit of Work.

Ici, pas de base de données : le Unit of Work délimite une section
atomique sur le registre des machines. Tant qu'on est dans le bloc
`with`, le verrou du registre est tenu, si bien que la vérification
du stock et sa modification ne peuvent pas être entrelacées avec
celles d'un autre thread.

Il collecte aussi les events émis par les machines vues pendant
la section, pour que le réacteur les publie :

    with uow:
        machine = uow.machines.get(id_machine)
        machine.vendre(quantité)
        nouveaux = list(uow.collect_new_events())
    for event in nouveaux:
        bus.publish(event)
"""

from __future__ import annotations

from typing import Iterator

from distributeurs.adapters.registre import RegistreMachines
from distributeurs.domain import events


class UnitOfWork:
    """Section atomique sur un registre partagé."""

    def __init__(self, machines: RegistreMachines):
        self.machines = machines

    def __enter__(self) -> UnitOfWork:
        self.machines.verrou.acquire()
        self.machines.seen.clear()
        return self

    def __exit__(self, *args: object) -> None:
        self.machines.verrou.release()

    def collect_new_events(self) -> Iterator[events.Event]:
        """
        Vide la liste d'events des machines vues pendant la section.

        À appeler dans le bloc `with` : les events sont retirés des
        machines sous le verrou.
        """
        for machine in self.machines.seen:
            while machine.événements:
                yield machine.événements.pop(0)
