"""Study materials: uploaded files and links kept by each user

Revision ID: b2c3d4e5f6a7
Revises: a1b2c3d4e5f6
Create Date: 2026-10-19
"""
from alembic import op
import sqlalchemy as sa

revision = "b2c3d4e5f6a7"
down_revision = "a1b2c3d4e5f6"
branch_labels = None
depends_on = None


material_type = sa.Enum("pdf", "doc", "video", "audio", "image", "url", "other", name="material_type")


def upgrade() -> None:
    op.create_table(
        "study_materials",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.Column("user_id", sa.Uuid(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("type", material_type, nullable=False),
        sa.Column("url", sa.String(length=2048), nullable=True),
        sa.Column("file_name", sa.String(length=255), nullable=True),
        sa.Column("file_path", sa.String(length=500), nullable=True),
        sa.Column("file_size", sa.BigInteger(), nullable=True),
        sa.Column("mime_type", sa.String(length=255), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("color", sa.String(length=20), nullable=True),
        sa.Column("folder_id", sa.String(length=64), nullable=True),
    )
    op.create_index("ix_study_materials_id", "study_materials", ["id"])
    op.create_index("ix_study_materials_user_id", "study_materials", ["user_id"])


def downgrade() -> None:
    op.drop_table("study_materials")
    material_type.drop(op.get_bind(), checkfirst=True)
