from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session
from typing import Optional
import logging

from app.config import settings
from app.errors import CustomHTTPException, InvalidTokenError
from app.extensions import get_db
from app.schemas.request import SignUpRequest, LoginRequest, EditRequest
from app.schemas.response import ProfileResponse, LoginUserResponse
from app.services import user_service, session_service, token_service
from app.utils.response import (
    success_response, error_response, bad_request_response,
    unauthorized_response, system_error_response
)
from app.utils.validation import validate_signup, validate_profile_edit

logger = logging.getLogger(__name__)

router = APIRouter(tags=["用户管理"], prefix="/users")


def _extract_token(request: Request) -> Optional[str]:
    """从 x-jwt-token 头或 Authorization: Bearer 头读取令牌"""
    token = request.headers.get(settings.JWT_HEADER_NAME)
    if token:
        return token
    auth_header = request.headers.get("Authorization")
    if auth_header and auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1]
    return None


def get_current_user_id(request: Request) -> Optional[int]:
    """
    获取当前登录用户ID

    优先使用请求携带的 JWT，没有令牌时使用 Cookie 会话。

    返回：
    - 用户ID
    - None: 如果没有登录或登录态无效
    """
    token = _extract_token(request)
    if token:
        try:
            claims = token_service.parse_token(token, request.headers.get("User-Agent", ""))
        except InvalidTokenError as e:
            logger.info(f"令牌无效: {e.detail}")
            return None
        return claims.uid

    session_id = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return session_service.get_session_user_id(session_id)


@router.post("/signup")
def signup(request_data: SignUpRequest, db: Session = Depends(get_db)):
    """
    用户注册

    参数：
    - request_data: 邮箱、密码、确认密码

    返回：
    - 注册成功时返回新用户ID
    """
    message = validate_signup(
        request_data.email, request_data.password, request_data.confirmPassword
    )
    if message:
        return bad_request_response(msg=message)

    try:
        user = user_service.signup(db, request_data.email, request_data.password)
    except CustomHTTPException as e:
        return error_response(e.code, e.msg)
    except Exception:
        logger.exception("注册时发生错误")
        return system_error_response("系统异常")

    return success_response(msg="注册成功", data={"id": user.id})


@router.post("/login")
def login(
    request_data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    用户登录（Cookie 会话）

    登录成功后在服务端创建会话，并通过 Cookie 下发会话ID
    """
    try:
        user = user_service.login(db, request_data.email, request_data.password)
        session_id = session_service.create_session(user.id)
    except CustomHTTPException as e:
        return error_response(e.code, e.msg)
    except Exception:
        logger.exception("登录时发生错误")
        return system_error_response()

    response.set_cookie(value=session_id, **session_service.cookie_options())
    return success_response(
        msg="登录成功",
        data=LoginUserResponse(id=user.id, email=user.email).model_dump()
    )


@router.post("/login_jwt")
def login_jwt(
    request_data: LoginRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """
    用户登录（JWT）

    登录成功后通过 x-jwt-token 响应头下发令牌，令牌绑定当前 User-Agent
    """
    try:
        user = user_service.login(db, request_data.email, request_data.password)
        token = token_service.create_token(user.id, request.headers.get("User-Agent", ""))
    except CustomHTTPException as e:
        return error_response(e.code, e.msg)
    except Exception:
        logger.exception("JWT 登录时发生错误")
        return system_error_response()

    response.headers[settings.JWT_HEADER_NAME] = token
    return success_response(
        msg="登录成功",
        data=LoginUserResponse(id=user.id, email=user.email).model_dump()
    )


@router.post("/logout")
async def logout(request: Request, response: Response):
    """退出登录：删除服务端会话并让 Cookie 立即过期"""
    session_service.destroy_session(request.cookies.get(settings.SESSION_COOKIE_NAME))
    options = session_service.cookie_options()
    response.delete_cookie(
        key=options["key"],
        secure=options["secure"],
        httponly=options["httponly"],
        samesite=options["samesite"],
    )
    return success_response(msg="退出登录成功")


@router.post("/edit")
def edit(
    request_data: EditRequest,
    db: Session = Depends(get_db),
    user_id: Optional[int] = Depends(get_current_user_id)
):
    """
    编辑个人资料

    只校验和更新非空字段
    """
    if user_id is None:
        return unauthorized_response()

    message = validate_profile_edit(
        nickname=request_data.nickname,
        birthday=request_data.birthday,
        introduction=request_data.introduction,
        location=request_data.location,
    )
    if message:
        return bad_request_response(msg=message)

    try:
        user_service.edit_profile(
            db,
            user_id,
            nickname=request_data.nickname,
            birthday=request_data.birthday,
            introduction=request_data.introduction,
            location=request_data.location,
            avatar=request_data.avatar,
        )
    except CustomHTTPException as e:
        return error_response(e.code, e.msg)
    except Exception:
        logger.exception(f"编辑资料时发生错误: userId={user_id}")
        return system_error_response("编辑失败")

    return success_response(msg="编辑成功")


@router.get("/profile")
def profile(
    db: Session = Depends(get_db),
    user_id: Optional[int] = Depends(get_current_user_id)
):
    """获取当前用户资料"""
    if user_id is None:
        return unauthorized_response()

    try:
        user = user_service.get_profile(db, user_id)
    except CustomHTTPException as e:
        return error_response(e.code, e.msg)
    except Exception:
        logger.exception(f"获取资料时发生错误: userId={user_id}")
        return system_error_response("获取简介失败")

    return success_response(
        data=ProfileResponse(
            email=user.email,
            nickname=user.nickname,
            birthday=user.birthday,
            introduction=user.introduction,
            location=user.location,
            avatar=user.avatar,
        ).model_dump()
    )


@router.get("/status")
async def status(user_id: Optional[int] = Depends(get_current_user_id)):
    """用户模块状态检查"""
    return success_response(msg="状态没问题", data={"loggedIn": user_id is not None})
