"""Workload Tracker package.

Feature modules (users, projects, memberships, worklogs, analytics, ...) follow the same
shape: frozen dataclass models, Protocol repositories with MySQL implementations, plain
service classes and a thin Flask controller layer.
"""
