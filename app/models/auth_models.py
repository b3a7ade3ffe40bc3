# app/models/auth_models.py
from typing import List

from pydantic import BaseModel


class PasswordValidationError(Exception):
    def __init__(self, messages: List[str]):
        self.messages = messages
        super().__init__(", ".join(messages))


class SignUpRequest(BaseModel):
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    success: bool
    message: str
    session: bool = False
