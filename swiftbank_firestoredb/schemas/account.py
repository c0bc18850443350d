from dataclasses import dataclass, field
from typing import Any, Dict, List, Union

from pydantic import BaseModel, Field, field_validator


def _first(raw: Dict[str, Any], *keys: str, default: Any = "") -> Any:
    return next((raw[key] for key in keys if raw.get(key)), default)


def _to_float(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


class AccountRecord(BaseModel):
    """Normalised account view, whatever shape the stored document had."""

    id: str
    accountType: str = "checking"
    accountNumber: str = ""
    routingNumber: str = ""
    balance: float = 0.0
    status: str = "active"
    userId: str = ""

    @classmethod
    def from_embedded(cls, raw: Dict[str, Any], user_id: str) -> "AccountRecord":
        return cls(
            id=str(_first(raw, "id", "accountId", "accountNumber", "number")),
            accountType=_first(raw, "accountType", "type", default="checking"),
            accountNumber=str(_first(raw, "accountNumber", "number")),
            routingNumber=str(_first(raw, "routingNumber", "routing")),
            balance=_to_float(raw.get("balance")),
            status=_first(raw, "status", default="active"),
            userId=_first(raw, "userId", default=user_id),
        )

    @classmethod
    def from_standalone(cls, raw: Dict[str, Any], user_id: str) -> "AccountRecord":
        return cls(
            id=str(raw.get("id", "")),
            accountType=_first(raw, "accountType", "type", default="checking"),
            accountNumber=str(_first(raw, "accountNumber", "number")),
            routingNumber=str(_first(raw, "routingNumber", "routing")),
            balance=_to_float(raw.get("balance")),
            status=_first(raw, "status", default="active"),
            userId=_first(raw, "userId", "customerUID", default=user_id),
        )


@dataclass(frozen=True)
class EmbeddedAccounts:
    """Accounts stored as an array on the user document."""

    records: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class StandaloneAccounts:
    """Accounts stored as documents in the accounts collection, already de-duplicated by id."""

    documents: List[Dict[str, Any]] = field(default_factory=list)


AccountSource = Union[EmbeddedAccounts, StandaloneAccounts]


def to_account_records(source: AccountSource, user_id: str) -> List[AccountRecord]:
    if isinstance(source, EmbeddedAccounts):
        return [AccountRecord.from_embedded(raw, user_id) for raw in source.records]
    return [AccountRecord.from_standalone(raw, user_id) for raw in source.documents]


class AccountCreate(BaseModel):
    accountType: str = Field(min_length=1)
    holderName: str
    initialBalance: float = 0.0
    benefits: List[str] = Field(default_factory=list)
    category: str = "deposit"
    description: str = ""

    @field_validator("holderName")
    @classmethod
    def holder_name_length(cls, value: str) -> str:
        if len(value.strip()) < 2:
            raise ValueError("Account holder name must be at least 2 characters")
        return value.strip()
