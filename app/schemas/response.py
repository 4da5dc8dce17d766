from pydantic import BaseModel
from typing import Optional


class ProfileResponse(BaseModel):
    """用户资料响应模型"""
    email: str
    nickname: Optional[str] = None
    birthday: Optional[str] = None
    introduction: Optional[str] = None
    location: Optional[str] = None
    avatar: Optional[str] = None


class LoginUserResponse(BaseModel):
    """登录成功后返回的用户信息"""
    id: int
    email: str
