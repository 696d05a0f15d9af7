"""Shift Payroll package.

Feature modules (shifts, timesheets, payroll, reports, ...) each follow the same
shape: frozen dataclass models, a repository Protocol, a MySQL repository, a
service holding the business rules and a thin Flask controller.
"""
