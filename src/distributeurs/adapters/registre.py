"""
Registre des machines.

Le registre joue le rôle du repository : une interface de type
collection (add, get) sur l'état mutable du domaine. Il reste en
mémoire, une seule instance étant partagée par référence entre tous
les réacteurs, pour que ventes et réapprovisionnements voient les
mêmes niveaux de stock.

Les noms de méthodes du pattern (add, get) restent en anglais.
"""

from __future__ import annotations

import threading
from typing import Iterable, Iterator

from distributeurs.domain import model


class MachineDupliquée(Exception):
    """Levée quand on enregistre deux machines avec le même id."""
    pass


class RegistreMachines:
    """
    Registre en mémoire, indexé par id de machine.

    `verrou` protège les séquences lecture-vérification-modification
    des réacteurs (voir le Unit of Work). `seen` trace les machines
    consultées, ce qui permet au Unit of Work de collecter leurs events.
    """

    def __init__(self, machines: Iterable[model.Machine] = ()):
        self._machines: dict[str, model.Machine] = {}
        self.seen: set[model.Machine] = set()
        self.verrou = threading.RLock()
        for machine in machines:
            self.add(machine)

    def add(self, machine: model.Machine) -> None:
        """Ajoute une machine au registre et la marque comme vue."""
        with self.verrou:
            if machine.id in self._machines:
                raise MachineDupliquée(f"Machine déjà enregistrée : {machine.id}")
            self._machines[machine.id] = machine
            self.seen.add(machine)

    def get(self, id_machine: str) -> model.Machine | None:
        """Récupère une machine par son id et la marque comme vue."""
        with self.verrou:
            machine = self._machines.get(id_machine)
            if machine is not None:
                self.seen.add(machine)
            return machine

    def liste(self) -> list[model.Machine]:
        """Toutes les machines, dans l'ordre d'enregistrement."""
        with self.verrou:
            return list(self._machines.values())

    def __contains__(self, id_machine: object) -> bool:
        return id_machine in self._machines

    def __iter__(self) -> Iterator[model.Machine]:
        return iter(self.liste())

    def __len__(self) -> int:
        return len(self._machines)
