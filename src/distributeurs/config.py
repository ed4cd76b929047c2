"""
Configuration, lue dans les variables d'environnement.

Chaque paramètre a une valeur par défaut qui permet de lancer
l'application et les tests sans rien configurer.
"""

from __future__ import annotations

import os

_VRAI = {"1", "true", "oui", "yes", "on"}


def get_ids_machines() -> list[str]:
    """Ids des machines créées au démarrage."""
    valeur = os.environ.get("DISTRIBUTEURS_MACHINES", "001,002,003")
    return [id_machine.strip() for id_machine in valeur.split(",") if id_machine.strip()]


def get_isoler_handlers() -> bool:
    """Si vrai, l'erreur d'un abonné n'interrompt pas le dispatch."""
    return os.environ.get("DISTRIBUTEURS_ISOLER_HANDLERS", "false").lower() in _VRAI


def get_notifications() -> str:
    """Adapter de notifications : "log" ou "email"."""
    return os.environ.get("DISTRIBUTEURS_NOTIFICATIONS", "log").lower()


def get_smtp_config() -> dict:
    return dict(
        smtp_host=os.environ.get("DISTRIBUTEURS_SMTP_HOST", "localhost"),
        smtp_port=int(os.environ.get("DISTRIBUTEURS_SMTP_PORT", "587")),
    )


def get_destination_alertes() -> str:
    return os.environ.get("DISTRIBUTEURS_DESTINATION_ALERTES", "stock@example.com")


def get_simulation_config() -> dict:
    """Nombre d'events et graine du générateur de démonstration."""
    graine = os.environ.get("DISTRIBUTEURS_SIMULATION_GRAINE")
    return dict(
        nombre=int(os.environ.get("DISTRIBUTEURS_SIMULATION_EVENTS", "5")),
        graine=int(graine) if graine else None,
    )


def get_niveau_log() -> str:
    return os.environ.get("DISTRIBUTEURS_LOG_LEVEL", "INFO").upper()
