import uuid
from datetime import datetime
from sqlalchemy import String, DateTime, Boolean, ForeignKey, Text, Integer, Float, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship
from .core.db import Base

def _uuid() -> str:
    return str(uuid.uuid4())

class User(Base):
    __tablename__ = "users"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    email: Mapped[str] = mapped_column(String(320), unique=True, index=True)
    # NULL for users who signed in through Firebase/Google
    password_hash: Mapped[str | None] = mapped_column(String(300), nullable=True)
    auth_provider: Mapped[str] = mapped_column(String(40), default="password")  # password|google|firebase
    provider_subject: Mapped[str | None] = mapped_column(String(200), nullable=True)
    name: Mapped[str] = mapped_column(String(200), default="")
    role: Mapped[str | None] = mapped_column(String(20), nullable=True)  # student|professional
    working_hours: Mapped[int | None] = mapped_column(Integer, nullable=True)
    free_time_from: Mapped[str | None] = mapped_column(String(5), nullable=True)  # HH:MM
    free_time_to: Mapped[str | None] = mapped_column(String(5), nullable=True)
    trusted_contact_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    trusted_contact_phone: Mapped[str | None] = mapped_column(String(30), nullable=True)
    # NULL until the first questionnaire or journal analysis
    risk_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    onboarding_complete: Mapped[bool] = mapped_column(Boolean, default=False)
    is_disabled: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    refresh_tokens: Mapped[list["RefreshToken"]] = relationship(back_populates="user", cascade="all, delete-orphan")
    onboarding_turns: Mapped[list["OnboardingTurn"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", order_by="OnboardingTurn.position"
    )

class RefreshToken(Base):
    __tablename__ = "refresh_tokens"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    token_jti: Mapped[str] = mapped_column(String(64), unique=True, index=True)  # hashed jti string
    expires_at: Mapped[datetime] = mapped_column(DateTime, index=True)
    revoked: Mapped[bool] = mapped_column(Boolean, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped["User"] = relationship(back_populates="refresh_tokens")

class OnboardingTurn(Base):
    __tablename__ = "onboarding_turns"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    position: Mapped[int] = mapped_column(Integer)
    speaker: Mapped[str] = mapped_column(String(10))  # user|ai
    text: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped["User"] = relationship(back_populates="onboarding_turns")

    __table_args__ = (UniqueConstraint("user_id", "position", name="uq_onboarding_turn_position"),)

class JournalEntry(Base):
    __tablename__ = "journal_entries"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    entry: Mapped[str] = mapped_column(Text)
    mood: Mapped[str | None] = mapped_column(String(40), nullable=True)
    sentiment_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    analyzed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

class ChatMessage(Base):
    __tablename__ = "chat_messages"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    role: Mapped[str] = mapped_column(String(20))  # user/assistant
    text: Mapped[str] = mapped_column(Text)
    mood: Mapped[str | None] = mapped_column(String(20), nullable=True)  # supportive/concerned/encouraging
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

class DailyTask(Base):
    __tablename__ = "daily_tasks"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    date: Mapped[str] = mapped_column(String(10))  # YYYY-MM-DD
    task_id: Mapped[str] = mapped_column(String(80))
    title: Mapped[str] = mapped_column(String(300))
    position: Mapped[int] = mapped_column(Integer, default=0)
    completed: Mapped[bool] = mapped_column(Boolean, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("user_id", "date", "task_id", name="uq_daily_task"),)

class WellnessPlan(Base):
    __tablename__ = "wellness_plans"
    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    user_id: Mapped[str] = mapped_column(String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True)
    mood_score: Mapped[float] = mapped_column(Float)
    anxiety_score: Mapped[float] = mapped_column(Float)
    stress_score: Mapped[float] = mapped_column(Float)
    social_engagement_score: Mapped[float] = mapped_column(Float)
    overall_score: Mapped[float] = mapped_column(Float)
    risk_level: Mapped[int] = mapped_column(Integer)
    should_referral: Mapped[bool] = mapped_column(Boolean, default=False)
    recommendations_json: Mapped[str] = mapped_column(Text, default="[]")
    activities_json: Mapped[str] = mapped_column(Text, default="[]")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)

Index("ix_chat_messages_user_created", ChatMessage.user_id, ChatMessage.created_at)
Index("ix_daily_tasks_user_date", DailyTask.user_id, DailyTask.date)
