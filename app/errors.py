from fastapi import HTTPException

class CustomHTTPException(HTTPException):
    def __init__(self, status_code=400, detail="请求错误", code=None, msg=None):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code if code is not None else status_code
        self.msg = msg if msg is not None else detail

class UserDuplicateEmailError(CustomHTTPException):
    def __init__(self, email: str):
        super().__init__(status_code=409, detail=f"邮箱 {email} 已被注册", code=409, msg="邮箱冲突")
        self.email = email

class UserNotFoundError(CustomHTTPException):
    def __init__(self, detail: str = "用户不存在"):
        super().__init__(status_code=404, detail=detail, code=404, msg="用户不存在")

class InvalidUserOrPasswordError(CustomHTTPException):
    def __init__(self):
        super().__init__(status_code=400, detail="用户名或密码不对", code=400, msg="用户名或密码不对")

class InvalidTokenError(CustomHTTPException):
    def __init__(self, detail: str = "无效的令牌"):
        super().__init__(status_code=401, detail=detail, code=401, msg="请先登录")

class SessionStoreError(CustomHTTPException):
    def __init__(self, detail: str = "会话写入失败"):
        super().__init__(status_code=500, detail=detail, code=500, msg="系统错误")
