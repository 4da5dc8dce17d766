from datetime import datetime
from sqlalchemy import Column, DateTime
from sqlalchemy.orm import declarative_base

# 所有表模型的基类
Base = declarative_base()

class BaseModel(Base):
    """带创建/更新时间的模型基类"""
    __abstract__ = True  # 抽象类，不生成实际表

    created_at = Column(DateTime, default=datetime.utcnow, comment="创建时间")
    updated_at = Column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        comment="更新时间"
    )
