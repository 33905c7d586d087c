from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from ...projects.model import Project


class CompletionStrategy(ABC):
    """Strategy interface: estimate how far along a project is, as a 0-100 percentage."""

    @abstractmethod
    def completion(self, project: Project) -> Decimal:
        raise NotImplementedError
