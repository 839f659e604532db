"""Actor identity and capability values supplied by the identity collaborator.

The lifecycle controller never branches on raw user flags.  Requests are
reduced to an immutable ``Actor`` (who is calling and in which role), and
per-order authority is expressed as a closed ``Capability`` value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from django.db import models


class ActorRole(models.TextChoices):
    REQUESTER = "requester", "Requester"
    ADMINISTRATOR = "administrator", "Administrator"


class Capability(models.TextChoices):
    OWNER = "owner", "Owner"
    ADMINISTRATOR = "administrator", "Administrator"


@dataclass(frozen=True)
class Actor:
    """Authenticated caller as seen by the services."""

    id: str
    role: str = ActorRole.REQUESTER

    @classmethod
    def from_user(cls, user: Any) -> Actor:
        """Build an actor from a Django user (``is_staff`` => administrator)."""
        role = ActorRole.ADMINISTRATOR if user.is_staff else ActorRole.REQUESTER
        return cls(id=str(user.pk), role=role)

    @property
    def is_admin(self) -> bool:
        return self.role == ActorRole.ADMINISTRATOR

    def owns(self, owner_id: Any) -> bool:
        return self.id == str(owner_id)

    def capability_for(self, owner_id: Any) -> Optional[Capability]:
        """Return the strongest capability this actor holds over a resource.

        Administrator wins over ownership; ``None`` means no authority.
        """
        if self.is_admin:
            return Capability.ADMINISTRATOR
        if self.owns(owner_id):
            return Capability.OWNER
        return None
