"""Error response schema.

All error responses use the same flat envelope: {"code": "...", "message": "..."}.
Exception handlers in main.py construct these from domain exceptions.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Error body with a machine-readable code and human-readable message."""

    code: str
    message: str
