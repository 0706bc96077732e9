from __future__ import annotations

from flask import Flask, request

from ..common.http import handle_domain_errors, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    groups = container.group_service

    def _form(data: dict) -> dict:
        return {
            "name": data.get("name", ""),
            "fee_per_session": data.get("fee_per_session"),
            "schedule": data.get("schedule") or [],
            "description": data.get("description"),
        }

    @app.route("/api/groups", methods=["GET"], endpoint="groups_list")
    @handle_domain_errors
    def groups_list():
        return ok(groups=[groups.to_ui(g) for g in groups.list_all()])

    @app.route("/api/groups", methods=["POST"], endpoint="groups_create")
    @handle_domain_errors
    def groups_create():
        group_id = groups.create(**_form(json_body()))
        return ok("Groupe ajouté", 201, id=group_id)

    @app.route("/api/groups/<group_id>", methods=["PUT"], endpoint="groups_update")
    @handle_domain_errors
    def groups_update(group_id: str):
        group = groups.update(group_id, **_form(json_body()))
        return ok("Groupe mis à jour", group=groups.to_ui(group))

    @app.route("/api/groups/<group_id>", methods=["DELETE"], endpoint="groups_delete")
    @handle_domain_errors
    def groups_delete(group_id: str):
        record = groups.delete(group_id)
        return ok("Groupe supprimé", archived_intervals=len(record.fee_history))

    @app.route("/api/groups/<group_id>/fee", methods=["GET"], endpoint="groups_fee")
    @handle_domain_errors
    def groups_fee(group_id: str):
        session_date = request.args.get("date", "")
        fee = container.ledger_service.fee_for_date(group_id, session_date)
        return ok(group_id=group_id, date=session_date, fee=fee)
