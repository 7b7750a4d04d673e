"""
Background services bootstrap schemas.
"""
from pydantic import BaseModel


class StartServicesResponse(BaseModel):
    success: bool
    message: str
    services: list[str]
