from __future__ import annotations

from flask import Flask

from ..common.http import handle_domain_errors, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    payments = container.payment_history_service

    @app.route("/api/students/<student_id>/payments", methods=["GET"], endpoint="payments_history")
    @handle_domain_errors
    def payments_history(student_id: str):
        view = payments.history_for_student(student_id)
        return ok(**payments.to_ui(view))

    @app.route("/api/students/<student_id>/payments.csv", methods=["GET"], endpoint="payments_export")
    @handle_domain_errors
    def payments_export(student_id: str):
        view = payments.history_for_student(student_id)
        filename = f"paiements_{view.student.last_name or student_id}.csv"
        return app.response_class(
            payments.to_csv_bytes(view),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )
