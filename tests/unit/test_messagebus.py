"""
Tests du contrat de routage du message bus.

Ordre d'appel, inscriptions multiples, désinscription par identité,
copie de la liste au début du dispatch, publication réentrante et
politique d'erreur des abonnés.
"""

from __future__ import annotations

import pytest

from distributeurs.domain import events
from distributeurs.service_layer.messagebus import Abonné, MessageBus


class Espion(Abonné):
    """Abonné qui enregistre les events reçus dans un journal partagé."""

    def __init__(self, nom: str, journal: list) -> None:
        self.nom = nom
        self.journal = journal

    def handle(self, event: events.Event) -> None:
        self.journal.append((self.nom, event))


class Défaillant(Abonné):
    def handle(self, event: events.Event) -> None:
        raise RuntimeError("abonné défaillant")


class TestSubscribe:
    def test_appelle_les_abonnés_dans_l_ordre_d_inscription(self):
        bus = MessageBus()
        journal: list = []
        bus.subscribe("sale", Espion("a", journal))
        bus.subscribe("sale", Espion("b", journal))
        vente = events.Vente("001", 1)

        bus.publish(vente)

        assert journal == [("a", vente), ("b", vente)]

    def test_inscription_multiple_appelée_plusieurs_fois(self):
        bus = MessageBus()
        journal: list = []
        espion = Espion("a", journal)
        bus.subscribe("sale", espion)
        bus.subscribe("sale", espion)

        bus.publish(events.Vente("001", 1))

        assert len(journal) == 2

    def test_seuls_les_abonnés_du_type_sont_appelés(self):
        bus = MessageBus()
        journal: list = []
        bus.subscribe("refill", Espion("a", journal))

        bus.publish(events.Vente("001", 1))

        assert journal == []

    def test_accepte_une_simple_fonction(self):
        bus = MessageBus()
        reçus: list = []
        bus.subscribe("sale", reçus.append)

        bus.publish(events.Vente("001", 1))

        assert reçus == [events.Vente("001", 1)]

    def test_publier_sans_abonné_ne_fait_rien(self):
        bus = MessageBus()
        bus.publish(events.StockNormal("001"))
        assert bus.abonnés("stock-level-ok") == []


class TestUnsubscribe:
    def test_retire_le_handler(self):
        bus = MessageBus()
        journal: list = []
        espion = Espion("a", journal)
        bus.subscribe("sale", espion)

        bus.unsubscribe("sale", espion)
        bus.publish(events.Vente("001", 1))

        assert journal == []

    def test_ne_retire_que_pour_le_type_donné(self):
        bus = MessageBus()
        journal: list = []
        espion = Espion("a", journal)
        bus.subscribe("low-stock-warning", espion)
        bus.subscribe("stock-level-ok", espion)

        bus.unsubscribe("low-stock-warning", espion)
        bus.publish(events.AlerteStockBas("001"))
        bus.publish(events.StockNormal("001"))

        assert journal == [("a", events.StockNormal("001"))]

    def test_ne_retire_pas_les_autres_handlers(self):
        bus = MessageBus()
        journal: list = []
        a, b = Espion("a", journal), Espion("b", journal)
        bus.subscribe("sale", a)
        bus.subscribe("sale", b)

        bus.unsubscribe("sale", a)

        assert bus.abonnés("sale") == [b]

    def test_comparaison_par_identité(self):
        """Un handler égal mais distinct n'est pas retiré."""

        class ToujoursÉgal(Espion):
            def __eq__(self, other: object) -> bool:
                return True

            __hash__ = object.__hash__

        bus = MessageBus()
        journal: list = []
        inscrit = ToujoursÉgal("a", journal)
        bus.subscribe("sale", inscrit)

        bus.unsubscribe("sale", ToujoursÉgal("b", journal))

        assert bus.abonnés("sale") == [inscrit]
        assert bus.abonnés("sale")[0] is inscrit

    def test_retire_toutes_les_inscriptions_du_handler(self):
        bus = MessageBus()
        journal: list = []
        espion = Espion("a", journal)
        bus.subscribe("sale", espion)
        bus.subscribe("sale", espion)

        bus.unsubscribe("sale", espion)
        bus.publish(events.Vente("001", 1))

        assert bus.abonnés("sale") == []
        assert journal == []

    def test_sans_effet_si_absent(self):
        bus = MessageBus()
        bus.unsubscribe("sale", Espion("a", []))
        bus.subscribe("sale", Espion("b", []))
        bus.unsubscribe("sale", Espion("c", []))
        assert len(bus.abonnés("sale")) == 1


class TestCopieDeLaListe:
    def test_inscription_pendant_le_dispatch_ignorée_pour_ce_publish(self):
        bus = MessageBus()
        journal: list = []
        tardif = Espion("tardif", journal)

        class Inscripteur(Abonné):
            def handle(self, event: events.Event) -> None:
                journal.append(("inscripteur", event))
                bus.subscribe("sale", tardif)

        bus.subscribe("sale", Inscripteur())
        bus.publish(events.Vente("001", 1))

        assert [nom for nom, _ in journal] == ["inscripteur"]

        journal.clear()
        bus.publish(events.Vente("001", 1))
        assert [nom for nom, _ in journal] == ["inscripteur", "tardif"]

    def test_désinscription_pendant_le_dispatch_ignorée_pour_ce_publish(self):
        bus = MessageBus()
        journal: list = []
        suivant = Espion("suivant", journal)

        class Désinscripteur(Abonné):
            def handle(self, event: events.Event) -> None:
                bus.unsubscribe("sale", suivant)

        bus.subscribe("sale", Désinscripteur())
        bus.subscribe("sale", suivant)
        bus.publish(events.Vente("001", 1))

        assert [nom for nom, _ in journal] == ["suivant"]
        assert suivant not in bus.abonnés("sale")


class TestPublicationRéentrante:
    def test_event_dérivé_dispatché_avant_le_retour(self):
        bus = MessageBus()
        journal: list = []

        class Relais(Abonné):
            def handle(self, event: events.Event) -> None:
                journal.append("début vente")
                bus.publish(events.AlerteStockBas(event.id_machine))
                journal.append("fin vente")

        bus.subscribe("sale", Relais())
        bus.subscribe("low-stock-warning", lambda event: journal.append("alerte"))

        bus.publish(events.Vente("001", 1))

        assert journal == ["début vente", "alerte", "fin vente"]


class TestErreurs:
    def test_erreur_propagée_et_abonnés_suivants_non_appelés(self):
        bus = MessageBus()
        journal: list = []
        bus.subscribe("sale", Espion("avant", journal))
        bus.subscribe("sale", Défaillant())
        bus.subscribe("sale", Espion("après", journal))

        with pytest.raises(RuntimeError, match="abonné défaillant"):
            bus.publish(events.Vente("001", 1))

        assert [nom for nom, _ in journal] == ["avant"]

    def test_mode_isolé_continue_et_logge(self, caplog):
        bus = MessageBus(isoler_handlers=True)
        journal: list = []
        bus.subscribe("sale", Défaillant())
        bus.subscribe("sale", Espion("après", journal))

        bus.publish(events.Vente("001", 1))

        assert [nom for nom, _ in journal] == ["après"]
        assert "Erreur lors du traitement" in caplog.text
