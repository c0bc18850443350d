from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TransactionCreate(BaseModel):
    model_config = ConfigDict(extra="allow")

    type: str = Field(min_length=1)
    amount: float = Field(gt=0)
    description: str
    userId: Optional[str] = None
    accountId: Optional[str] = None
    fromAccount: Optional[str] = None
    toAccount: Optional[str] = None

    @field_validator("description")
    @classmethod
    def description_length(cls, value: str) -> str:
        if len(value.strip()) < 3:
            raise ValueError("Description must be at least 3 characters")
        return value.strip()
