"""Class Attendance package.

Feature modules (users, students, subjects, attendance, analytics) each keep a
domain model, a repository interface with its MySQL implementation, a service
layer and a thin Flask controller.
"""
