"""
Point d'entrée Flask.

L'API Flask est un thin adapter : elle convertit les requêtes HTTP
en events, les publie sur le message bus, et renvoie l'état de la
machine concernée.

L'API ne contient aucune logique métier. Une vente refusée pour
stock insuffisant n'est pas une erreur HTTP : l'event a bien été
accepté, le refus est signalé par les notifications.
"""

from __future__ import annotations

from flask import Flask, jsonify, request

from distributeurs.domain import events
from distributeurs.service_layer import bootstrap
from distributeurs.views import views


app = Flask(__name__)
registre = bootstrap.créer_registre()
bus = bootstrap.bootstrap(registre=registre)


def _publier(fabrique_event):
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        return jsonify({"message": "Le corps JSON doit être un objet"}), 400
    try:
        id_machine = data["id_machine"]
        event = fabrique_event(id_machine, data["quantité"])
    except KeyError as e:
        return jsonify({"message": f"Champ manquant : {e.args[0]}"}), 400
    except ValueError as e:
        return jsonify({"message": str(e)}), 400

    if id_machine not in registre:
        return jsonify({"message": f"Machine inconnue : {id_machine}"}), 404

    bus.publish(event)
    return jsonify(views.machine(id_machine, registre)), 202


@app.route("/ventes", methods=["POST"])
def vente_endpoint():
    """
    POST /ventes
    Body JSON : { id_machine, quantité }

    Publie une Vente. Retourne l'état de la machine après dispatch.
    """
    return _publier(
        lambda id_machine, quantité: events.Vente(id_machine=id_machine, quantité_vendue=quantité)
    )


@app.route("/reapprovisionnements", methods=["POST"])
def réapprovisionnement_endpoint():
    """
    POST /reapprovisionnements
    Body JSON : { id_machine, quantité }

    Publie un Réapprovisionnement. Retourne l'état de la machine après dispatch.
    """
    return _publier(
        lambda id_machine, quantité: events.Réapprovisionnement(
            id_machine=id_machine, quantité_ajoutée=quantité
        )
    )


@app.route("/machines", methods=["GET"])
def machines_endpoint():
    return jsonify(views.machines(registre)), 200


@app.route("/machines/<id_machine>", methods=["GET"])
def machine_endpoint(id_machine: str):
    """
    GET /machines/<id_machine>

    Retourne le niveau de stock d'une machine.
    """
    result = views.machine(id_machine, registre)
    if result is None:
        return "not found", 404
    return jsonify(result), 200
