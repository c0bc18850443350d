from typing import Any, Dict, Optional

from fastapi import HTTPException
from pydantic import BaseModel

from .error_codes import CustomError, ErrorCodes


class StandardResponse(BaseModel):
    status: bool
    data: Any = None
    message: str = ""
    code: int = 200
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def success(cls, data: Any = None, message: str = "") -> "StandardResponse":
        return cls(status=True, data=data, message=message)

    @classmethod
    def failure(cls, code: int, error_message: str, error_kind: Optional[str] = None) -> "StandardResponse":
        return cls(status=False, code=code, error_message=error_message, error_kind=error_kind)

    @classmethod
    def from_error(cls, error: Exception) -> "StandardResponse":
        if isinstance(error, CustomError):
            return cls.failure(error.code, error.message, error.kind.value)
        return cls.failure(ErrorCodes.get_http_status_code(error), str(error))

    @classmethod
    def bad_request(cls, error_message: str) -> "StandardResponse":
        return cls.failure(ErrorCodes.BAD_REQUEST, error_message)

    @classmethod
    def not_found(cls, error_message: str) -> "StandardResponse":
        return cls.failure(ErrorCodes.NOT_FOUND, error_message)

    @classmethod
    def conflict(cls, error_message: str) -> "StandardResponse":
        return cls.failure(ErrorCodes.CONFLICT, error_message)

    @classmethod
    def internal_error(cls, error_message: str) -> "StandardResponse":
        return cls.failure(ErrorCodes.INTERNAL_SERVER_ERROR, error_message)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump()

    def raise_http_exception(self) -> None:
        """Raise the failure as a FastAPI HTTPException; no-op on success."""
        if self.status:
            return
        raise HTTPException(
            status_code=self.code,
            detail={"kind": self.error_kind, "message": self.error_message},
        )
