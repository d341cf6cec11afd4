"""
enps_survey.db.models

Core persistence schema for the survey service.

Responsibilities:
- Define ORM models:
  - User: Telegram identity, upserted on every authenticated request
  - Project: survey target, unique by case-insensitive name
  - Survey: one respondent's answers for one project on one calendar date
- Define the closed set of answer fields and their column mapping.
"""

from __future__ import annotations

import enum
from datetime import UTC, date, datetime
from typing import Any, assert_never

from sqlalchemy import (
    Date,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import InstrumentedAttribute, Mapped, mapped_column, relationship

from enps_survey.db.base import Base, Id


def utcnow() -> datetime:
    # Naive UTC timestamps: SQLite has no tz-aware storage and both backends must agree.
    return datetime.now(UTC).replace(tzinfo=None)


class ContributionValue(enum.StrEnum):
    yes = "yes"
    partial = "partial"
    no = "no"


class AnswerField(enum.StrEnum):
    # Values double as column names; order follows the questionnaire.
    project_recommendation = "project_recommendation"
    project_improvement = "project_improvement"
    manager_effectiveness = "manager_effectiveness"
    manager_improvement = "manager_improvement"
    team_comfort = "team_comfort"
    team_improvement = "team_improvement"
    process_organization = "process_organization"
    process_obstacles = "process_obstacles"
    contribution_valued = "contribution_valued"
    improvement_ideas = "improvement_ideas"


RATING_FIELDS: tuple[AnswerField, ...] = (
    AnswerField.project_recommendation,
    AnswerField.manager_effectiveness,
    AnswerField.team_comfort,
    AnswerField.process_organization,
)

TEXT_FIELDS: tuple[AnswerField, ...] = (
    AnswerField.project_improvement,
    AnswerField.manager_improvement,
    AnswerField.team_improvement,
    AnswerField.process_obstacles,
    AnswerField.improvement_ideas,
)


class User(Base):
    __tablename__ = "users"

    # Telegram user id; assigned externally, never generated.
    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=False)
    first_name: Mapped[str] = mapped_column(Text, nullable=False)
    last_name: Mapped[str | None] = mapped_column(Text, nullable=True)
    username: Mapped[str | None] = mapped_column(Text, nullable=True)
    language_code: Mapped[str | None] = mapped_column(String(16), nullable=True)
    photo_url: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class Project(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    created_by: Mapped[int | None] = mapped_column(
        Id, ForeignKey("users.id"), nullable=True, index=True
    )
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    surveys: Mapped[list[Survey]] = relationship(
        back_populates="project", cascade="all, delete-orphan", passive_deletes=True
    )


# Case-insensitive uniqueness; a functional index works on both SQLite and Postgres.
Index("uq_projects_name_lower", func.lower(Project.name), unique=True)


class Survey(Base):
    __tablename__ = "surveys"

    id: Mapped[int] = mapped_column(Id, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Id, ForeignKey("users.id"), nullable=False)
    project_id: Mapped[int] = mapped_column(
        Id, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False
    )
    survey_date: Mapped[date] = mapped_column(Date, nullable=False)

    project_recommendation: Mapped[int | None] = mapped_column(Integer, nullable=True)
    project_improvement: Mapped[str | None] = mapped_column(Text, nullable=True)
    manager_effectiveness: Mapped[int | None] = mapped_column(Integer, nullable=True)
    manager_improvement: Mapped[str | None] = mapped_column(Text, nullable=True)
    team_comfort: Mapped[int | None] = mapped_column(Integer, nullable=True)
    team_improvement: Mapped[str | None] = mapped_column(Text, nullable=True)
    process_organization: Mapped[int | None] = mapped_column(Integer, nullable=True)
    process_obstacles: Mapped[str | None] = mapped_column(Text, nullable=True)
    contribution_valued: Mapped[ContributionValue | None] = mapped_column(
        Enum(
            ContributionValue,
            name="contribution_valued",
            native_enum=False,
            create_constraint=True,
            length=16,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=True,
    )
    improvement_ideas: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)

    project: Mapped[Project] = relationship(back_populates="surveys")
    user: Mapped[User] = relationship()

    __table_args__ = (
        UniqueConstraint("user_id", "project_id", "survey_date", name="uq_surveys_user_project_date"),
        Index("ix_surveys_project_created", "project_id", "created_at"),
    )

    def get_answer(self, field: AnswerField) -> Any:
        return getattr(self, answer_column(field).key)

    def set_answer(self, field: AnswerField, value: Any) -> bool:
        """Assign one answer; returns True when the stored value actually changed."""
        if self.get_answer(field) == value:
            return False
        setattr(self, answer_column(field).key, value)
        return True

    @property
    def is_complete(self) -> bool:
        return all(self.get_answer(field) is not None for field in AnswerField)


def answer_column(field: AnswerField) -> InstrumentedAttribute[Any]:
    match field:
        case AnswerField.project_recommendation:
            return Survey.project_recommendation
        case AnswerField.project_improvement:
            return Survey.project_improvement
        case AnswerField.manager_effectiveness:
            return Survey.manager_effectiveness
        case AnswerField.manager_improvement:
            return Survey.manager_improvement
        case AnswerField.team_comfort:
            return Survey.team_comfort
        case AnswerField.team_improvement:
            return Survey.team_improvement
        case AnswerField.process_organization:
            return Survey.process_organization
        case AnswerField.process_obstacles:
            return Survey.process_obstacles
        case AnswerField.contribution_valued:
            return Survey.contribution_valued
        case AnswerField.improvement_ideas:
            return Survey.improvement_ideas
        case _:
            assert_never(field)


# --- Module Notes -----------------------------------------------------------
# survey_date + the (user, project, date) unique constraint is what makes survey
# creation idempotent; see `db.repositories.surveys.SurveyRepo.create_or_get`.
