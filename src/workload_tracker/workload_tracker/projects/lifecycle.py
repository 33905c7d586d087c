from __future__ import annotations

from typing import Protocol

from .model import Project


class ProjectLifecycleListener(Protocol):
    """Informed when a project reaches Closed (event in, nothing returned)."""

    def project_closed(self, project: Project) -> None:
        raise NotImplementedError
