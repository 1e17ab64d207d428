from fastapi import Depends, HTTPException, Request

from app.core.exceptions import PermissionDeniedError
from app.schemas.user import Actor, ActorRole


def get_current_actor(request: Request) -> Actor:
    """Resolve the calling actor from the ``X-Actor-Id`` / ``X-Actor-Role`` headers.

    Identity is established upstream; this only carries it into the ledger's
    visibility rules.
    """
    actor_id = (request.headers.get("X-Actor-Id") or "").strip()
    raw_role = (request.headers.get("X-Actor-Role") or "").strip().lower()

    if not actor_id or not raw_role:
        raise HTTPException(status_code=401, detail="X-Actor-Id and X-Actor-Role are required")

    try:
        role = ActorRole(raw_role)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid X-Actor-Role header") from None

    return Actor(id=actor_id, role=role)


def require_provider(actor: Actor = Depends(get_current_actor)) -> Actor:
    """Only providers may issue, edit or delete invoices."""
    if actor.role != ActorRole.PROVIDER:
        raise PermissionDeniedError("Only providers can manage invoices")
    return actor


def can_view_invoice(actor: Actor, provider_id: str, purchaser_id: str) -> bool:
    if actor.role == ActorRole.PROVIDER:
        return actor.id == provider_id
    return actor.id == purchaser_id
