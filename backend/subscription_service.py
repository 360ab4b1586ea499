"""
Case subscription service.

Validates subscription requests and performs the (case_id, email) upsert
while enforcing the free-tier cap on the number of cases per email.
"""
import enum
import logging
import re
from datetime import datetime
from typing import Optional

from sqlalchemy import func, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from config import get_settings
from db_models import CaseSubscription

logger = logging.getLogger(__name__)

# Case ID format: 24E000000-123 (ASCII digits only)
CASE_ID_PATTERN = re.compile(r"^\d{2}[A-Z]\d{6}-\d{3}$", re.ASCII)
EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

FREE_TIER_LIMIT_MESSAGE = (
    "Free tier limit reached! Please upgrade your plan to monitor additional cases."
)


class SubscriptionValidationError(ValueError):
    """Missing or malformed subscription field."""


class FreeTierLimitReached(Exception):
    """The email already uses every case slot the free tier allows."""

    def __init__(self, email: str, limit: int):
        super().__init__(FREE_TIER_LIMIT_MESSAGE)
        self.email = email
        self.limit = limit


class SubscriptionOutcome(enum.Enum):
    CREATED = "created"
    UPDATED = "updated"


def is_valid_case_id(case_id: Optional[str]) -> bool:
    """Check a North Carolina case ID such as 24E000000-123."""
    return isinstance(case_id, str) and CASE_ID_PATTERN.fullmatch(case_id) is not None


def is_valid_email(email: Optional[str]) -> bool:
    return isinstance(email, str) and EMAIL_PATTERN.fullmatch(email) is not None


def validate_subscription(case_id: Optional[str], email: Optional[str]) -> None:
    """
    Validate the identifying fields of a subscription request.

    Checks run in order (presence, case ID shape, email shape) and the
    first failure is raised.

    Raises:
        SubscriptionValidationError: with the message returned to the caller
    """
    if not case_id or not email:
        raise SubscriptionValidationError("Case ID and email are required")

    if not is_valid_case_id(case_id):
        raise SubscriptionValidationError("Invalid case ID format")

    if not is_valid_email(email):
        raise SubscriptionValidationError("Invalid email format")


def get_subscription(db: Session, case_id: str, email: str) -> Optional[CaseSubscription]:
    """Get the subscription for a case/email pair."""
    return db.query(CaseSubscription).filter(
        CaseSubscription.case_id == case_id,
        CaseSubscription.email == email,
    ).first()


def count_subscriptions_for_email(db: Session, email: str) -> int:
    """Count subscriptions for an email across all cases."""
    return db.query(func.count(CaseSubscription.id)).filter(
        CaseSubscription.email == email
    ).scalar() or 0


def lock_email(db: Session, email: str) -> None:
    """
    Serialize writers for one email until the current transaction ends.

    PostgreSQL gets a transaction-scoped advisory lock keyed on the email.
    SQLite has no row or advisory locks, and pysqlite defers BEGIN until the
    first write, so the transaction is opened with BEGIN IMMEDIATE to take the
    database write lock before the lookup and the quota count.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        db.execute(text("SELECT pg_advisory_xact_lock(hashtext(:email))"), {"email": email})
    elif dialect == "sqlite":
        driver_connection = db.connection().connection.driver_connection
        if not driver_connection.in_transaction:
            db.execute(text("BEGIN IMMEDIATE"))


def _update_subscription(db: Session, subscription: CaseSubscription, is_active: bool) -> None:
    subscription.is_active = is_active
    subscription.updated_at = func.now()
    db.commit()


def upsert_subscription(
    db: Session,
    case_id: str,
    email: str,
    subscription_date: Optional[datetime] = None,
    is_active: bool = True,
    limit: Optional[int] = None,
) -> SubscriptionOutcome:
    """
    Create or update the subscription for a case/email pair.

    The lookup, the quota count and the write share one transaction, and the
    email is locked first, so two requests for the same new email cannot both
    pass the quota check.

    Args:
        db: Database session
        case_id: Validated case ID
        email: Validated email address
        subscription_date: Client-supplied signup timestamp
        is_active: Whether notifications are enabled
        limit: Free-tier case cap (defaults to the configured value)

    Returns:
        SubscriptionOutcome.UPDATED if the pair already existed, CREATED otherwise

    Raises:
        FreeTierLimitReached: if the email already has `limit` subscriptions
    """
    if limit is None:
        limit = get_settings().free_tier_case_limit

    try:
        lock_email(db, email)

        existing = get_subscription(db, case_id, email)
        if existing:
            _update_subscription(db, existing, is_active)
            logger.info(f"Subscription updated: {case_id} -> {email} (active={is_active})")
            return SubscriptionOutcome.UPDATED

        count = count_subscriptions_for_email(db, email)
        if count >= limit:
            db.rollback()
            logger.warning(f"Free tier limit reached for {email} ({count}/{limit}), rejected {case_id}")
            raise FreeTierLimitReached(email, limit)

        subscription = CaseSubscription(
            case_id=case_id,
            email=email,
            subscription_date=subscription_date,
            is_active=is_active,
        )
        db.add(subscription)
        try:
            db.commit()
        except IntegrityError:
            # Another request inserted the same pair first; update that row instead.
            db.rollback()
            existing = get_subscription(db, case_id, email)
            if existing is None:
                raise
            _update_subscription(db, existing, is_active)
            logger.info(f"Subscription updated after concurrent insert: {case_id} -> {email}")
            return SubscriptionOutcome.UPDATED

        logger.info(f"Subscription created: {case_id} -> {email}")
        return SubscriptionOutcome.CREATED
    except FreeTierLimitReached:
        raise
    except Exception:
        db.rollback()
        raise
