from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime, timezone
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from app.config import settings
from app.extensions import get_db
from app.utils.cache import cache_manager
from app.utils.response import success_response

router = APIRouter(tags=["系统状态"])

@router.get("/health")
async def check_health(db: Session = Depends(get_db)):
    """
    服务健康检查
    """
    try:
        db.execute(text("SELECT 1"))
        db_status = "connected"
    except SQLAlchemyError as e:
        error_msg = str(e)
        # 截断错误信息，避免太长
        if len(error_msg) > 50:
            error_msg = error_msg[:50] + "..."
        db_status = f"disconnected ({error_msg})"

    return success_response(data={
        "status": "healthy",
        "database": db_status,
        "sessionStore": "redis" if cache_manager.using_redis else "memory",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": settings.APP_NAME,
        "version": settings.APP_VERSION,
    })
