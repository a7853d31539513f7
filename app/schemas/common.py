from pydantic import BaseModel


class ErrorDetail(BaseModel):
    message: str | list[str]
    status: int


class ErrorResponse(BaseModel):
    error: ErrorDetail

    @classmethod
    def build(cls, message: str | list[str], status: int) -> "ErrorResponse":
        return cls(error=ErrorDetail(message=message, status=status))
