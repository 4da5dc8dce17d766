"""
用户服务：注册、登录、资料读取与编辑

密码使用 bcrypt 加盐哈希，数据库中不保存明文。
"""

from typing import Optional
from sqlalchemy.orm import Session
import bcrypt
import logging

from app.config import settings
from app.errors import InvalidUserOrPasswordError, UserNotFoundError
from app.models.user import User
from app.services import user_repository

logger = logging.getLogger(__name__)

# bcrypt 只使用前 72 字节
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode('utf-8')[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """生成 bcrypt 密码哈希"""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    """校验明文密码与 bcrypt 哈希是否匹配"""
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode('utf-8'))
    except ValueError as e:
        # 库里的值不是合法的 bcrypt 哈希
        logger.error(f"密码哈希格式错误: {e}")
        return False


def signup(db: Session, email: str, password: str) -> User:
    """
    注册新用户

    异常：
    - UserDuplicateEmailError，如果邮箱已被注册
    """
    user = user_repository.create(db, email=email, password_hash=hash_password(password))
    logger.info(f"新用户注册: id={user.id}, email={email}")
    return user


def login(db: Session, email: str, password: str) -> User:
    """
    邮箱密码登录

    异常：
    - InvalidUserOrPasswordError，如果邮箱未注册或密码不匹配
    """
    try:
        user = user_repository.find_by_email(db, email)
    except UserNotFoundError:
        logger.info(f"登录失败，邮箱未注册: {email}")
        raise InvalidUserOrPasswordError()

    if not verify_password(password, user.password):
        logger.info(f"登录失败，密码错误: id={user.id}")
        raise InvalidUserOrPasswordError()

    return user


def get_profile(db: Session, user_id: int) -> User:
    """读取用户资料，用户不存在时抛出 UserNotFoundError"""
    return user_repository.find_by_id(db, user_id)


def edit_profile(
    db: Session,
    user_id: int,
    nickname: Optional[str] = None,
    birthday: Optional[str] = None,
    introduction: Optional[str] = None,
    location: Optional[str] = None,
    avatar: Optional[str] = None,
) -> User:
    """编辑非凭据资料字段，空字段不覆盖原值"""
    return user_repository.update_profile(
        db,
        user_id,
        nickname=nickname,
        birthday=birthday,
        introduction=introduction,
        location=location,
        avatar=avatar,
    )
