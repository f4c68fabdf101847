import re
from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

# PokeAPI species slugs: "pikachu", "mr-mime", "porygon2"
_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")


def normalize_name(name: str) -> str:
    """Case-insensitive, whitespace-trimmed form used for lookups and cache keys."""
    return name.strip().lower()


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UPSTREAM_UNAVAILABLE = "upstream_unavailable"
    RATE_LIMITED = "rate_limited"
    TIMEOUT = "timeout"


# Model for an inbound lookup (Internal Contract)
class LookupRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str

    @field_validator("name")
    @classmethod
    def _normalize(cls, value: str) -> str:
        value = normalize_name(value)
        if not value:
            raise ValueError("name must not be empty")
        if not _NAME_PATTERN.match(value):
            raise ValueError("name may only contain letters, digits and hyphens")
        return value


# Stored by the response cache, replaced wholesale on refresh
class CacheEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    created_at: float


# Outcomes of one orchestration run: exactly one of these is returned
class Translation(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    description: str
    cached: bool = False


class LookupFailure(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    kind: ErrorKind


OrchestrationResult = Translation | LookupFailure


# Model for the final API response (Public Contract)
class PokemonResponse(BaseModel):
    name: str
    description: str


class ErrorResponse(BaseModel):
    error: str
