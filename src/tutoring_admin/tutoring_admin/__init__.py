"""Tutoring Admin package.

Organized by feature modules (students, groups, attendance, ledger, payments)
with a thin Flask controller layer over service/repository layers. All
persistence goes through a document-store client (see ``store``).
"""
