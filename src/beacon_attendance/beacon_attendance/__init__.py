"""Beacon Attendance package.

Feature modules (rooms, attendance, analytics, reports, users) each carry a
model, a repository protocol with MySQL / in-memory implementations, a service
and a thin Flask controller.
"""
