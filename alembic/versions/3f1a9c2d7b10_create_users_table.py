"""create users table

Revision ID: 3f1a9c2d7b10
Revises: 
Create Date: 2026-10-16 10:12:05.318204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1a9c2d7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False, comment='用户ID'),
        sa.Column('email', sa.String(length=128), nullable=False, comment='登录邮箱（唯一）'),
        sa.Column('password', sa.String(length=255), nullable=False, comment='bcrypt 密码哈希，不存明文'),
        sa.Column('nickname', sa.String(length=64), nullable=True, comment='昵称'),
        sa.Column('birthday', sa.String(length=16), nullable=True, comment='生日，YYYY-MM-DD'),
        sa.Column('introduction', sa.String(length=1024), nullable=True, comment='个人简介'),
        sa.Column('location', sa.String(length=255), nullable=True, comment='所在地'),
        sa.Column('avatar', sa.String(length=512), nullable=True, comment='头像地址'),
        sa.Column('created_at', sa.DateTime(), nullable=True, comment='创建时间'),
        sa.Column('updated_at', sa.DateTime(), nullable=True, comment='更新时间'),
        sa.PrimaryKeyConstraint('id')
    )
    # 邮箱唯一索引
    op.create_index('ix_users_email', 'users', ['email'], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
