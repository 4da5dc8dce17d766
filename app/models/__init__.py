"""模型统一导出入口，供Alembic和业务代码调用"""
from .base import Base
from .user import User

__all__ = ["Base", "User"]
