"""Public orchestration API."""

from .import_project import import_project
from .make import make
from .package import package

__all__ = ["import_project", "make", "package"]
