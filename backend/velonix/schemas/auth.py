from pydantic import BaseModel


class AdminLogin(BaseModel):
    username: str
    password: str


class Token(BaseModel):
    token: str


class AdminIdentity(BaseModel):
    """Identity carried by a verified admin token"""
    id: int
    username: str
