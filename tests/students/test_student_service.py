from __future__ import annotations

from datetime import date

import pytest

from src.tutoring_admin.tutoring_admin.core.enums import Collection
from src.tutoring_admin.tutoring_admin.core.exceptions import MalformedDocumentError, NotFoundError, ValidationError
from src.tutoring_admin.tutoring_admin.students.repository import student_from_document


def test_create_and_get(container, make_group):
    group_id = make_group()
    student_id = container.student_service.create(
        first_name=" Lina ", last_name="Haddad", registration_date="2025-02-01", group_id=group_id
    )

    student = container.student_service.get(student_id)
    assert student.full_name == "Lina Haddad"
    assert student.registration_date == date(2025, 2, 1)
    assert (student.lessons_attended, student.montant, student.paid) == (0, 0.0, False)


@pytest.mark.parametrize(
    "overrides",
    [
        {"first_name": ""},
        {"last_name": "  "},
        {"registration_date": None},
        {"group_id": ""},
        {"registration_date": "01/02/2025"},
        {"montant": -1},
        {"lessons_attended": 1.5},
    ],
)
def test_create_validation(container, overrides):
    fields = {
        "first_name": "Lina",
        "last_name": "Haddad",
        "registration_date": "2025-02-01",
        "group_id": "g1",
    }
    fields.update(overrides)

    with pytest.raises(ValidationError):
        container.student_service.create(**fields)


def test_toggle_paid_flips_flag_only(container, make_group, make_student):
    student_id = make_student(make_group(), montant=40, lessons_attended=2)

    assert container.student_service.toggle_paid(student_id) is True
    student = container.student_service.get(student_id)
    assert student.paid is True
    assert student.montant == 40
    assert container.student_service.toggle_paid(student_id) is False


def test_list_is_sorted_and_filtered_by_group(container, make_group, make_student):
    g1 = make_group(name="A")
    g2 = make_group(name="B")
    make_student(g1, first_name="Zoe", last_name="Martin")
    make_student(g1, first_name="Adam", last_name="Martin")
    make_student(g2, first_name="Yanis", last_name="Abid")

    names = [s.full_name for s in container.student_service.list_all()]
    assert names == ["Yanis Abid", "Adam Martin", "Zoe Martin"]
    assert len(container.student_service.list_all(group_id=g1)) == 2


def test_summary_counts_paid_and_totals(container, make_group, make_student):
    group_id = make_group()
    make_student(group_id, montant=20)
    make_student(group_id, first_name="Sami", montant=35, paid=True)

    summary = container.student_service.summary()

    assert (summary.total, summary.paid, summary.unpaid) == (2, 1, 1)
    assert summary.total_due == 55


def test_delete_unknown_student(container):
    with pytest.raises(NotFoundError):
        container.student_service.delete("nope")


def test_delete_keeps_attendance(container, store, make_group, make_student):
    group_id = make_group()
    student_id = make_student(group_id)
    container.ledger_service.set_presence(
        student_id=student_id, group_id=group_id, session_date="2025-03-03", session_time="10:00"
    )

    container.student_service.delete(student_id)

    assert len(store.docs(Collection.ATTENDANCE)) == 1


def test_malformed_document_is_rejected():
    with pytest.raises(MalformedDocumentError):
        student_from_document({"id": "s1", "firstName": "A", "lastName": "B", "dateOfRegistration": "2025-13-01"})
    with pytest.raises(MalformedDocumentError):
        student_from_document(
            {"id": "s1", "firstName": "A", "lastName": "B", "dateOfRegistration": "2025-01-01", "montant": "12"}
        )
