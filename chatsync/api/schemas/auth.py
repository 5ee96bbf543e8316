from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SmsCodeRequest(BaseModel):
    phone: str = Field(..., min_length=1)
    fullname: Optional[str] = None


class CodeLoginRequest(BaseModel):
    phone: str = Field(..., min_length=1)
    code: str = Field(..., min_length=1)


class PasswordLoginRequest(BaseModel):
    login: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    user_id: str = Field(alias="userId")
    user_token: str = Field(alias="userToken")
    name: str = ""
    client_id: Optional[int] = Field(default=None, alias="clientId")
    staff_id: Optional[int] = Field(default=None, alias="staffId")
    created: bool = False
