"""
Session models — result of the SDK authentication exchange.
"""

from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class UserInfo(BaseModel):
    uid: Optional[str] = None
    username: str


class AuthResult(BaseModel):
    """SDK authenticate() result"""
    access_token: Optional[str] = Field(default=None, alias="accessToken")
    user: UserInfo

    model_config = ConfigDict(populate_by_name=True)


class Session(BaseModel):
    username: Optional[str] = None
    auth: Optional[AuthResult] = None
