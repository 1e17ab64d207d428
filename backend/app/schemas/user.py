from enum import Enum

from pydantic import BaseModel


class ActorRole(str, Enum):
    PROVIDER = "provider"
    PURCHASER = "purchaser"


class Actor(BaseModel):
    """The caller on whose behalf the ledger is queried."""

    id: str
    role: ActorRole

    model_config = {"frozen": True}


class UserProfile(BaseModel):
    id: str
    role: ActorRole
    name: str | None = None
    email: str | None = None
    company: str | None = None
