from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator


class BatchOperationType(str, Enum):
    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


class BatchOperation(BaseModel):
    type: BatchOperationType
    collection: str = Field(min_length=1)
    id: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode="after")
    def require_id_for_existing_documents(self) -> "BatchOperation":
        if self.type != BatchOperationType.SET and not self.id:
            raise ValueError(f"'{self.type.value}' operations need a document id")
        return self
