from __future__ import annotations

from flask import Flask, request

from ..common.http import handle_domain_errors, json_body, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    students = container.student_service

    def _form(data: dict) -> dict:
        return {
            "first_name": data.get("first_name", ""),
            "last_name": data.get("last_name", ""),
            "registration_date": data.get("registration_date", ""),
            "group_id": data.get("group_id", ""),
            "paid": bool(data.get("paid", False)),
            "lessons_attended": data.get("lessons_attended", 0),
            "montant": data.get("montant", 0),
        }

    @app.route("/api/students", methods=["GET"], endpoint="students_list")
    @handle_domain_errors
    def students_list():
        group_id = request.args.get("group_id") or None
        return ok(students=[students.to_ui(s) for s in students.list_all(group_id=group_id)])

    @app.route("/api/students", methods=["POST"], endpoint="students_create")
    @handle_domain_errors
    def students_create():
        student_id = students.create(**_form(json_body()))
        return ok("Étudiant ajouté", 201, id=student_id)

    @app.route("/api/students/summary", methods=["GET"], endpoint="students_summary")
    @handle_domain_errors
    def students_summary():
        summary = students.summary(group_id=request.args.get("group_id") or None)
        return ok(
            total=summary.total,
            paid=summary.paid,
            unpaid=summary.unpaid,
            total_due=summary.total_due,
        )

    @app.route("/api/students/<student_id>", methods=["GET"], endpoint="students_get")
    @handle_domain_errors
    def students_get(student_id: str):
        return ok(student=students.to_ui(students.get(student_id)))

    @app.route("/api/students/<student_id>", methods=["PUT"], endpoint="students_update")
    @handle_domain_errors
    def students_update(student_id: str):
        student = students.update(student_id, **_form(json_body()))
        return ok("Étudiant mis à jour", student=students.to_ui(student))

    @app.route("/api/students/<student_id>", methods=["DELETE"], endpoint="students_delete")
    @handle_domain_errors
    def students_delete(student_id: str):
        students.delete(student_id)
        return ok("Étudiant supprimé")

    @app.route("/api/students/<student_id>/toggle-paid", methods=["POST"], endpoint="students_toggle_paid")
    @handle_domain_errors
    def students_toggle_paid(student_id: str):
        paid = students.toggle_paid(student_id)
        return ok("Payé" if paid else "Non payé", paid=paid)

    @app.route("/api/students/<student_id>/balance", methods=["GET"], endpoint="students_balance")
    @handle_domain_errors
    def students_balance(student_id: str):
        report = container.ledger_service.reconcile(student_id)
        return ok(
            recorded_lessons=report.recorded_lessons,
            recorded_montant=report.recorded_montant,
            expected_lessons=report.expected_lessons,
            expected_montant=report.expected_montant,
            consistent=report.consistent,
        )
