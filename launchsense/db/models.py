"""
LaunchSense SQLAlchemy Models.

JSON columns use JSONB on PostgreSQL and plain JSON elsewhere (SQLite in
dev/tests).
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import JSON, Boolean, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from launchsense.db.engine import Base

JSONType = JSON().with_variant(JSONB(), "postgresql")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DecisionRuleRecord(Base):
    """
    Decision rules — owned by the rule-management collaborator.

    The pipeline only reads active rows, ordered by priority then id.
    """

    __tablename__ = "ls_decision_rules"
    __table_args__ = (
        Index("ix_decision_rules_active_priority", "active", "priority"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    rule_key: Mapped[str] = mapped_column(String(64), nullable=False)
    min_value: Mapped[Optional[float]] = mapped_column(Float)
    max_value: Mapped[Optional[float]] = mapped_column(Float)
    decision: Mapped[str] = mapped_column(String(16), nullable=False)
    priority: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    description: Mapped[Optional[str]] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)


class SignalWeightRecord(Base):
    """Confidence weight per signal key."""

    __tablename__ = "ls_signal_weights"

    signal_key: Mapped[str] = mapped_column(String(64), primary_key=True)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=1.0)


class LedgerRecord(Base):
    """
    Immutable decision ledger.

    CRITICAL: NO UPDATE, NO DELETE on this table. Ever.
    Also serves as the per-game decision history.
    """

    __tablename__ = "ls_decision_ledger"
    __table_args__ = (
        Index("ix_decision_ledger_game_created", "game_id", "created_at"),
    )

    ledger_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    game_id: Mapped[str] = mapped_column(String(128), nullable=False)
    decision: Mapped[str] = mapped_column(String(16), nullable=False)
    decision_source: Mapped[str] = mapped_column(String(16), nullable=False)
    risk_score: Mapped[Optional[float]] = mapped_column(Float)
    confidence: Mapped[Optional[float]] = mapped_column(Float)
    explanation_id: Mapped[Optional[str]] = mapped_column(String(36))
    temporal_trend: Mapped[Optional[str]] = mapped_column(String(16))
    temporal_volatility: Mapped[Optional[float]] = mapped_column(Float)
    temporal_shock: Mapped[Optional[bool]] = mapped_column(Boolean)
    input_snapshot: Mapped[dict] = mapped_column(JSONType, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
