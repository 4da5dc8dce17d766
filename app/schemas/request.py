from pydantic import BaseModel, Field
from typing import Optional


class SignUpRequest(BaseModel):
    """注册请求模型"""
    email: str = Field("", description="登录邮箱")
    password: str = Field("", description="密码")
    confirmPassword: str = Field("", description="确认密码")


class LoginRequest(BaseModel):
    """登录请求模型"""
    email: str = Field("", description="登录邮箱")
    password: str = Field("", description="密码")


class EditRequest(BaseModel):
    """资料编辑请求模型，留空的字段不修改"""
    nickname: Optional[str] = Field("", description="昵称")
    birthday: Optional[str] = Field("", description="生日，YYYY-MM-DD")
    introduction: Optional[str] = Field("", description="个人简介")
    location: Optional[str] = Field("", description="所在地")
    avatar: Optional[str] = Field("", max_length=512, description="头像地址")
