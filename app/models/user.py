# user.py

from sqlalchemy import Column, String, Integer
from .base import BaseModel

class User(BaseModel):
    """用户表模型"""
    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True, comment='用户ID')
    email = Column(String(128), unique=True, nullable=False, index=True, comment='登录邮箱（唯一）')
    password = Column(String(255), nullable=False, comment='bcrypt 密码哈希，不存明文')
    nickname = Column(String(64), nullable=True, comment='昵称')
    birthday = Column(String(16), nullable=True, comment='生日，YYYY-MM-DD')
    introduction = Column(String(1024), nullable=True, comment='个人简介')
    location = Column(String(255), nullable=True, comment='所在地')
    avatar = Column(String(512), nullable=True, comment='头像地址')

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', nickname='{self.nickname}')>"
