"""initial_schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19 00:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

Id = sa.BigInteger().with_variant(sa.Integer(), "sqlite")


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", Id, primary_key=True, autoincrement=False),
        sa.Column("first_name", sa.Text(), nullable=False),
        sa.Column("last_name", sa.Text(), nullable=True),
        sa.Column("username", sa.Text(), nullable=True),
        sa.Column("language_code", sa.String(16), nullable=True),
        sa.Column("photo_url", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "projects",
        sa.Column("id", Id, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(120), nullable=False),
        sa.Column("created_by", Id, sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
    )
    op.create_index("ix_projects_created_by", "projects", ["created_by"])
    op.create_index(
        "uq_projects_name_lower", "projects", [sa.text("lower(name)")], unique=True
    )

    op.create_table(
        "surveys",
        sa.Column("id", Id, primary_key=True, autoincrement=True),
        sa.Column("user_id", Id, sa.ForeignKey("users.id"), nullable=False),
        sa.Column(
            "project_id", Id, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("survey_date", sa.Date(), nullable=False),
        sa.Column("project_recommendation", sa.Integer(), nullable=True),
        sa.Column("project_improvement", sa.Text(), nullable=True),
        sa.Column("manager_effectiveness", sa.Integer(), nullable=True),
        sa.Column("manager_improvement", sa.Text(), nullable=True),
        sa.Column("team_comfort", sa.Integer(), nullable=True),
        sa.Column("team_improvement", sa.Text(), nullable=True),
        sa.Column("process_organization", sa.Integer(), nullable=True),
        sa.Column("process_obstacles", sa.Text(), nullable=True),
        sa.Column(
            "contribution_valued",
            sa.String(16),
            sa.CheckConstraint(
                "contribution_valued IN ('yes', 'partial', 'no')", name="contribution_valued"
            ),
            nullable=True,
        ),
        sa.Column("improvement_ideas", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.UniqueConstraint(
            "user_id", "project_id", "survey_date", name="uq_surveys_user_project_date"
        ),
    )
    op.create_index("ix_surveys_project_created", "surveys", ["project_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_surveys_project_created", table_name="surveys")
    op.drop_table("surveys")
    op.drop_index("uq_projects_name_lower", table_name="projects")
    op.drop_index("ix_projects_created_by", table_name="projects")
    op.drop_table("projects")
    op.drop_table("users")
