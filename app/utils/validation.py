import re
from typing import Optional

# 字段格式规则：整串匹配
EMAIL_PATTERN = re.compile(r'^\w+([-+.]\w+)*@\w+([-.]\w+)*\.\w+([-.]\w+)*$')
PASSWORD_PATTERN = re.compile(r'^(?=.*[A-Za-z])(?=.*\d)(?=.*[$@$!%*#?&])[A-Za-z\d$@$!%*#?&]{8,}$')
BIRTHDAY_PATTERN = re.compile(r'^(19|20)\d{2}-\d{2}-\d{2}$')
NICKNAME_PATTERN = re.compile(r'^[\u4e00-\u9fa5_a-zA-Z0-9]{2,10}$')
INTRODUCTION_PATTERN = re.compile(r'^[\u4e00-\u9fa5，。]{10,300}$')
LOCATION_PATTERN = re.compile(r'^[\u4e00-\u9fa5]{3,60}$')

# 与 users.email 列宽一致
EMAIL_MAX_LENGTH = 128

MSG_EMAIL = "你的邮箱格式不对"
MSG_PASSWORD_MISMATCH = "两次输入的密码不一致"
MSG_PASSWORD = "密码至少8位,包含数字、特殊字符"
MSG_BIRTHDAY = "生日格式不对,必须以19或者20开头,正确例子1999-01-28"
MSG_NICKNAME = "昵称格式不对,2到10个中文、字母、数字或下划线"
MSG_INTRODUCTION = "个人简介格式不对,至少10个中文字符,并且不能超过300个中文字符"
MSG_LOCATION = "地址格式不对,至少3个中文字符,并且不能超过60个中文字符"


def _full_match(pattern: re.Pattern, value: Optional[str]) -> bool:
    # $ 允许匹配末尾换行，这里用 fullmatch 保证整串
    return bool(value) and pattern.fullmatch(value) is not None


def validate_email(email: str) -> bool:
    """
    验证邮箱格式

    示例：
    - user@example.com ✓
    - first.last+tag@mail.example.org ✓
    - user@ ✗
    - @example.com ✗
    - 超过 EMAIL_MAX_LENGTH 个字符 ✗
    """
    if email and len(email) > EMAIL_MAX_LENGTH:
        return False
    return _full_match(EMAIL_PATTERN, email)


def validate_password(password: str) -> bool:
    """
    验证密码强度

    规则：至少8位，同时包含字母、数字、特殊字符（$@!%*#?&），
    且只能由这些字符组成
    """
    return _full_match(PASSWORD_PATTERN, password)


def validate_birthday(birthday: str) -> bool:
    """验证生日格式：19xx-xx-xx 或 20xx-xx-xx"""
    return _full_match(BIRTHDAY_PATTERN, birthday)


def validate_nickname(nickname: str) -> bool:
    """验证昵称：2到10个中文、字母、数字或下划线"""
    return _full_match(NICKNAME_PATTERN, nickname)


def validate_introduction(introduction: str) -> bool:
    """验证个人简介：10到300个中文字符（允许中文逗号、句号）"""
    return _full_match(INTRODUCTION_PATTERN, introduction)


def validate_location(location: str) -> bool:
    """验证地址：3到60个中文字符"""
    return _full_match(LOCATION_PATTERN, location)


def validate_signup(email: str, password: str, confirm_password: str) -> Optional[str]:
    """
    校验注册请求

    顺序：邮箱格式 → 两次密码一致 → 密码强度。
    两次密码不一致时，无论密码强度如何都判定失败。

    返回：
    - None，如果全部通过
    - 面向用户的错误提示，如果有字段不合法
    """
    if not validate_email(email):
        return MSG_EMAIL
    if confirm_password != password:
        return MSG_PASSWORD_MISMATCH
    if not validate_password(password):
        return MSG_PASSWORD
    return None


def validate_profile_edit(
    nickname: Optional[str] = None,
    birthday: Optional[str] = None,
    introduction: Optional[str] = None,
    location: Optional[str] = None,
) -> Optional[str]:
    """
    校验资料编辑请求

    只校验非空字段，空字段跳过（表示不修改）。
    返回第一个不合法字段的提示，全部通过返回 None。
    """
    checks = (
        (birthday, validate_birthday, MSG_BIRTHDAY),
        (nickname, validate_nickname, MSG_NICKNAME),
        (introduction, validate_introduction, MSG_INTRODUCTION),
        (location, validate_location, MSG_LOCATION),
    )
    for value, rule, message in checks:
        if value and not rule(value):
            return message
    return None
