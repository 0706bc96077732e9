from __future__ import annotations

from flask import Flask, request

from ..common.datetime_utils import now_local
from ..common.http import fail, handle_domain_errors, json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    ledger = container.ledger_service
    grid_service = container.attendance_grid_service

    def _slot(data: dict) -> dict:
        return {
            "student_id": data.get("student_id", ""),
            "group_id": data.get("group_id", ""),
            "session_date": data.get("date", ""),
            "session_time": data.get("time", ""),
        }

    def _outcome(outcome):
        payload = {
            "present": outcome.state.present,
            "paid": outcome.state.paid,
            "fee": outcome.fee,
            "lessons_attended": outcome.lessons_attended,
            "montant": outcome.montant,
        }
        if not outcome.applied:
            # Blocking warning: nothing was written.
            return fail(outcome.warning, 409, **payload)
        return ok(**payload)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_grid")
    @handle_domain_errors
    def attendance_grid():
        today = now_local()
        try:
            year = int(request.args.get("year", today.year))
            month = int(request.args.get("month", today.month))
        except ValueError:
            raise ValidationError("Mois ou année invalide") from None
        grid = grid_service.month_grid(group_id=request.args.get("group_id", ""), year=year, month=month)
        return ok(**grid_service.to_ui(grid))

    @app.route("/api/attendance/presence", methods=["POST"], endpoint="attendance_presence")
    @handle_domain_errors
    def attendance_presence():
        return _outcome(ledger.set_presence(**_slot(json_body())))

    @app.route("/api/attendance/paid", methods=["POST"], endpoint="attendance_paid")
    @handle_domain_errors
    def attendance_paid():
        return _outcome(ledger.set_paid(**_slot(json_body())))
