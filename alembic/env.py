# alembic/env.py
from logging.config import fileConfig
import sys
from pathlib import Path

from sqlalchemy import create_engine, pool
from alembic import context

# 将项目根目录添加到Python路径（确保能导入app模块）
sys.path.append(str(Path(__file__).resolve().parent.parent))

# 从模型统一入口导入Base
from app.models import Base
from app.config import settings

config = context.config

# 配置日志（读取alembic.ini中的日志设置）
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata

# 数据库地址以应用配置（.env / 环境变量）为准
DATABASE_URL = config.get_main_option("sqlalchemy.url") or settings.DATABASE_URL


def _connect_args() -> dict:
    if DATABASE_URL.startswith("mysql"):
        return {"charset": "utf8mb4"}
    return {}


def run_migrations_offline() -> None:
    """
    离线模式：仅需数据库URL，生成 SQL 脚本
    """
    context.configure(
        url=DATABASE_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """
    在线模式：创建数据库引擎并建立连接
    """
    connectable = create_engine(
        DATABASE_URL,
        poolclass=pool.NullPool,  # 迁移脚本无需连接池
        connect_args=_connect_args()
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
