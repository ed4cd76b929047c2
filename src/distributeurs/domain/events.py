"""
Events du domaine.

Les events représentent des faits qui se sont produits sur une machine.
Ils sont immuables et portent un tag de type (`type`) qui sert de clé
de routage au message bus, ainsi que l'identifiant de la machine concernée.

Ventes et réapprovisionnements sont les events primaires, publiés par
l'extérieur. Les alertes de seuil (AlerteStockBas, StockNormal) sont
dérivées : elles sont publiées par les réacteurs.
"""

from dataclasses import dataclass
from typing import ClassVar

VENTE = "sale"
RÉAPPROVISIONNEMENT = "refill"
ALERTE_STOCK_BAS = "low-stock-warning"
STOCK_NORMAL = "stock-level-ok"


def _vérifier_quantité(quantité: int) -> None:
    if isinstance(quantité, bool) or not isinstance(quantité, int):
        raise ValueError(f"Quantité non entière : {quantité!r}")
    if quantité < 0:
        raise ValueError(f"Quantité négative : {quantité}")


@dataclass(frozen=True)
class Event:
    """Classe de base pour tous les events du domaine."""

    type: ClassVar[str]

    id_machine: str

    def __post_init__(self) -> None:
        if not isinstance(self.id_machine, str):
            raise ValueError(f"Id de machine non textuel : {self.id_machine!r}")


@dataclass(frozen=True)
class Vente(Event):
    """Des unités ont été vendues par une machine."""

    type: ClassVar[str] = VENTE

    quantité_vendue: int

    def __post_init__(self) -> None:
        super().__post_init__()
        _vérifier_quantité(self.quantité_vendue)


@dataclass(frozen=True)
class Réapprovisionnement(Event):
    """Une machine a été rechargée."""

    type: ClassVar[str] = RÉAPPROVISIONNEMENT

    quantité_ajoutée: int

    def __post_init__(self) -> None:
        super().__post_init__()
        _vérifier_quantité(self.quantité_ajoutée)


@dataclass(frozen=True)
class AlerteStockBas(Event):
    """Le stock d'une machine vient de passer sous le seuil d'alerte."""

    type: ClassVar[str] = ALERTE_STOCK_BAS


@dataclass(frozen=True)
class StockNormal(Event):
    """Le stock d'une machine est revenu au-dessus du seuil d'alerte."""

    type: ClassVar[str] = STOCK_NORMAL
