from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from sqlalchemy.exc import SQLAlchemyError
from .config import settings
from .extensions import engine
from app.models import Base
import app.routes.health as health_router
import app.routes.users as users_router
import logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    应用生命周期管理
    - 启动时：创建数据库表（如果不存在）
    """
    try:
        logger.info("正在检查并创建数据库表（如果不存在）...")
        Base.metadata.create_all(bind=engine)
        logger.info("数据库表检查完成，所有表已就绪")
    except SQLAlchemyError as e:
        logger.error(f"数据库连接失败，无法创建表: {e}")
        # 应用需要数据库才能正常工作，阻止启动
        raise RuntimeError(
            f"数据库初始化失败: {e}\n"
            "请检查数据库服务状态和连接配置，然后重新启动应用。"
        ) from e

    yield


# 创建FastAPI应用
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# 配置CORS，前端需要读取 JWT 响应头
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=[settings.JWT_HEADER_NAME],
)

# 注册路由
app.include_router(health_router.router)
app.include_router(users_router.router)

@app.get("/")
async def root():
    """返回 API 信息"""
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "docs": "/docs",
        "health": "/health",
    }
