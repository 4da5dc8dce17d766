from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from app.models.user import User
from app.errors import UserDuplicateEmailError, UserNotFoundError
import logging

logger = logging.getLogger(__name__)

# 允许编辑的非凭据字段
PROFILE_FIELDS = ("nickname", "birthday", "introduction", "location", "avatar")


def find_by_email(db: Session, email: str) -> User:
    """
    按邮箱查询用户

    异常：
    - UserNotFoundError，如果邮箱未注册
    """
    user = db.query(User).filter(User.email == email).first()
    if not user:
        raise UserNotFoundError(f"邮箱 {email} 未注册")
    return user


def find_by_id(db: Session, user_id: int) -> User:
    """
    按ID查询用户

    异常：
    - UserNotFoundError，如果用户不存在
    """
    # TODO: 先查 cache，未命中再查库并回写 cache
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise UserNotFoundError(f"用户 {user_id} 不存在")
    return user


def email_registered(db: Session, email: str) -> bool:
    """邮箱是否已被注册"""
    return db.query(User.id).filter(User.email == email).first() is not None


def create(db: Session, email: str, password_hash: str) -> User:
    """
    新建用户记录

    参数：
    - email: 登录邮箱
    - password_hash: 已经过 bcrypt 处理的密码

    异常：
    - UserDuplicateEmailError，如果邮箱已被注册
    """
    if email_registered(db, email):
        raise UserDuplicateEmailError(email)

    user = User(email=email, password=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        # 并发注册时查询都通过，由唯一索引兜底
        db.rollback()
        logger.info(f"注册时触发邮箱唯一索引冲突: {email}")
        raise UserDuplicateEmailError(email) from e
    db.refresh(user)
    return user


def update_profile(db: Session, user_id: int, **fields: Optional[str]) -> User:
    """
    更新用户资料

    只写入非空字段，空字段保持原值不变。
    邮箱和密码不在可编辑范围内。
    """
    user = find_by_id(db, user_id)
    for name, value in fields.items():
        if name not in PROFILE_FIELDS:
            raise ValueError(f"不可编辑的字段: {name}")
        if value:
            setattr(user, name, value)
    db.commit()
    db.refresh(user)
    return user
