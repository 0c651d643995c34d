"""
Collaborator contracts (``hr_kernel.domain.collaborators``).

The HR kernel owns no storage and no session handling.  These protocols
describe the low-code backend client the services are handed: a generic
per-entity-type collection API and a resolver for the signed-in user.
Records are plain dicts; serialization is the store's concern.
"""

from __future__ import annotations

from typing import Any, Protocol

from hr_kernel.domain.approval import Principal


class EntityCollection(Protocol):
    """CRUD surface for one entity type (Employee, Payroll, LoanRequest, ...)."""

    def list(self, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """Return records matching every key/value in ``filters``."""
        ...

    def create(self, data: dict[str, Any]) -> dict[str, Any]:
        """Persist a new record and return it with its assigned ``id``."""
        ...

    def update(self, entity_id: str, data: dict[str, Any]) -> dict[str, Any]:
        """Merge ``data`` into the record and return the updated record."""
        ...

    def delete(self, entity_id: str) -> None:
        ...


class EntityStore(Protocol):
    """Entity-store client."""

    def collection(self, entity_type: str) -> EntityCollection:
        ...


class SessionResolver(Protocol):
    """Resolves the acting principal for the current session."""

    def current_principal(self) -> Principal | None:
        ...
