"""Common Pydantic schemas used across the API."""

from typing import Any, List, Optional

from pydantic import BaseModel


class ErrorDetail(BaseModel):
    """Error detail for error responses."""

    code: str
    message: str
    attempts: Optional[List[Any]] = None
