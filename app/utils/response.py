from typing import Any


def success_response(data: Any = None, msg: str = "success") -> dict:
    """成功响应"""
    return {
        "code": 200,
        "msg": msg,
        "data": data
    }


def error_response(code: int = 400, msg: str = "请求错误", data: Any = None) -> dict:
    """错误响应"""
    return {
        "code": code,
        "msg": msg,
        "data": data
    }


def bad_request_response(msg: str = "请求参数错误", data: Any = None) -> dict:
    """请求参数错误响应（字段校验失败）"""
    return error_response(400, msg, data)


def unauthorized_response(msg: str = "请先登录") -> dict:
    """未登录响应"""
    return error_response(401, msg)


def system_error_response(msg: str = "系统错误") -> dict:
    """系统错误响应，具体原因只写日志"""
    return error_response(500, msg)
