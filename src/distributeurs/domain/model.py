"""
Modèle de domaine des machines de distribution.

Une Machine porte un niveau de stock, modifié uniquement par les ventes
et les réapprovisionnements. Elle porte aussi le drapeau `stock_bas`,
qui rend les alertes de seuil déclenchées sur front : une alerte est
émise au moment où le seuil est franchi, pas à chaque opération
effectuée sous le seuil.

La Machine n'appelle jamais le message bus : elle enregistre ses
events dans `événements`, que le Unit of Work collecte ensuite.
"""

from __future__ import annotations

from distributeurs.domain import events

STOCK_INITIAL = 10
SEUIL_STOCK_BAS = 3


class StockInsuffisant(Exception):
    """Levée quand une vente dépasse le stock disponible d'une machine."""

    def __init__(self, id_machine: str, demandé: int, disponible: int):
        super().__init__(
            f"Stock insuffisant sur la machine {id_machine} :"
            f" {demandé} demandées, {disponible} disponibles"
        )
        self.id_machine = id_machine
        self.demandé = demandé
        self.disponible = disponible


class Machine:
    """
    Entité représentant une machine de distribution.

    L'identité est portée par `id` : deux Machine de même id sont égales,
    quel que soit leur niveau de stock.
    """

    def __init__(self, id: str, niveau_stock: int = STOCK_INITIAL):
        if niveau_stock < 0:
            raise ValueError(f"Niveau de stock négatif : {niveau_stock}")
        self.id = id
        self.niveau_stock = niveau_stock
        self.stock_bas = False
        self.événements: list[events.Event] = []

    def __repr__(self) -> str:
        return f"<Machine {self.id} stock={self.niveau_stock}>"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Machine):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def peut_vendre(self, quantité: int) -> bool:
        return quantité <= self.niveau_stock

    def vendre(self, quantité: int) -> None:
        """
        Retire `quantité` unités du stock.

        Une vente qui rendrait le stock négatif est refusée en bloc :
        StockInsuffisant est levée et rien n'est modifié.
        Émet AlerteStockBas si le stock passe sous le seuil et que la
        machine n'était pas déjà signalée.
        """
        if not self.peut_vendre(quantité):
            raise StockInsuffisant(self.id, quantité, self.niveau_stock)
        self.niveau_stock -= quantité
        if self.niveau_stock < SEUIL_STOCK_BAS and not self.stock_bas:
            self.stock_bas = True
            self.événements.append(events.AlerteStockBas(id_machine=self.id))

    def réapprovisionner(self, quantité: int) -> None:
        """
        Ajoute `quantité` unités au stock (pas de capacité maximale).

        Émet StockNormal si la machine était signalée en stock bas et
        que le stock revient au seuil ou au-dessus.
        """
        self.niveau_stock += quantité
        if self.niveau_stock >= SEUIL_STOCK_BAS and self.stock_bas:
            self.stock_bas = False
            self.événements.append(events.StockNormal(id_machine=self.id))
