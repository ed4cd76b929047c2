"""
Views (lecture) sur l'état des machines.

Fonctions de lecture pure : elles interrogent le registre et
renvoient des dicts sérialisables, sans passer par le message bus.
"""

from __future__ import annotations

from distributeurs.adapters.registre import RegistreMachines
from distributeurs.domain import model


def _vue(machine: model.Machine) -> dict:
    return dict(id=machine.id, niveau_stock=machine.niveau_stock, stock_bas=machine.stock_bas)


def machines(registre: RegistreMachines) -> list[dict]:
    """Toutes les machines, dans l'ordre d'enregistrement."""
    with registre.verrou:
        return [_vue(machine) for machine in registre.liste()]


def machine(id_machine: str, registre: RegistreMachines) -> dict | None:
    with registre.verrou:
        trouvée = registre.get(id_machine)
        return _vue(trouvée) if trouvée is not None else None
