# bookstore/models.py
from pydantic import BaseModel


class ServiceInfo(BaseModel):
    success: bool = True
    message: str
    version: str


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
