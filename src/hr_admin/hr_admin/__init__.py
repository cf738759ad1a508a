"""HR Admin package.

Organized by feature modules (employees, attendance, leaves, tasks, reports)
with a thin Flask controller layer on top of service/repository layers.
"""
