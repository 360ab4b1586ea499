"""
SQLAlchemy database models for the NC case notification service.
"""
from sqlalchemy import (
    Column, Integer, String, DateTime, Enum, Boolean, Text, UniqueConstraint
)
from sqlalchemy.sql import func
from database import Base
import enum


class CaseSubscription(Base):
    """An email address watching one North Carolina court case."""
    __tablename__ = "case_subscriptions"
    __table_args__ = (
        UniqueConstraint("case_id", "email", name="uq_case_subscriptions_case_email"),
    )

    id = Column(Integer, primary_key=True, index=True)

    case_id = Column(String(20), nullable=False, index=True)  # e.g. "24E000000-123"
    email = Column(String(255), nullable=False, index=True)

    # Client-supplied timestamp from the signup form
    subscription_date = Column(DateTime(timezone=True))
    is_active = Column(Boolean, default=True, nullable=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        state = "active" if self.is_active else "inactive"
        return f"<CaseSubscription {self.case_id} -> {self.email} ({state})>"


class ErrorSeverity(enum.Enum):
    """Severity levels for error logs."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorLog(Base):
    """Error log for API and database failures."""
    __tablename__ = "error_logs"

    id = Column(Integer, primary_key=True, index=True)

    # Error classification
    severity = Column(Enum(ErrorSeverity), default=ErrorSeverity.ERROR, nullable=False, index=True)
    error_type = Column(String(100), nullable=False, index=True)  # e.g., "database", "subscription"
    error_code = Column(String(50))  # HTTP status or custom code

    # Error details
    message = Column(Text, nullable=False)
    stack_trace = Column(Text)
    request_data = Column(Text)  # JSON blob with sanitized request data

    # Context
    endpoint = Column(String(200), index=True)
    ip_address = Column(String(45))
    user_agent = Column(String(500))

    # Timestamp
    created_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)

    def __repr__(self):
        return f"<ErrorLog {self.severity.value} - {self.error_type}: {self.message[:50]}>"
