"""
Client-side model of the case subscription form.

Mirrors the endpoint's format checks for immediate feedback, submits to
POST /api/subscribe and tracks which view the user should see next.
"""
import enum
import logging
from datetime import datetime, timezone
from typing import Dict, Optional

import httpx

from config import get_pricing_url
from models import SubscribeRequest
from subscription_service import is_valid_case_id, is_valid_email

logger = logging.getLogger(__name__)

SUBSCRIBE_PATH = "/api/subscribe"

CASE_ID_ERROR = "Please enter a valid case ID (format: 24E000000-123)"
EMAIL_ERROR = "Please enter a valid email address"
DEFAULT_SUBMIT_ERROR = "Failed to subscribe"
GENERIC_SUBMIT_ERROR = "An error occurred while subscribing. Please try again."


class FormView(str, enum.Enum):
    """Which screen the form is showing."""
    FORM = "form"
    CONFIRMATION = "confirmation"
    UPGRADE_REQUIRED = "upgrade_required"


class SubscriptionForm:
    """State of one subscription form."""

    def __init__(self, case_id: str = "", email: str = ""):
        self.case_id = case_id
        self.email = email
        self.errors: Dict[str, str] = {}
        self.is_submitting = False
        self.submit_error = ""
        self.view = FormView.FORM
        self.confirmation: Optional[Dict[str, str]] = None
        self.pricing_url: Optional[str] = None

    def validate(self) -> bool:
        """Check both fields and record an error for each invalid one."""
        errors = {}
        if not is_valid_case_id(self.case_id):
            errors["case_id"] = CASE_ID_ERROR
        if not is_valid_email(self.email):
            errors["email"] = EMAIL_ERROR
        self.errors = errors
        return not errors

    def build_payload(self) -> dict:
        """JSON body for the subscribe endpoint."""
        request = SubscribeRequest(
            case_id=self.case_id,
            email=self.email,
            subscription_date=datetime.now(timezone.utc),
            is_active=True,
        )
        return request.model_dump(mode="json", by_alias=True)

    async def submit(self, client: httpx.AsyncClient) -> FormView:
        """
        Validate, then POST the subscription and move to the resulting view.

        No request is made when local validation fails. Failures never raise;
        they end up in `submit_error` or the upgrade prompt.
        """
        self.submit_error = ""
        if not self.validate():
            return self.view

        self.is_submitting = True
        try:
            response = await client.post(SUBSCRIBE_PATH, json=self.build_payload())

            if response.status_code == 403:
                self.view = FormView.UPGRADE_REQUIRED
                self.pricing_url = get_pricing_url()
                return self.view

            data = response.json()
            if not response.is_success:
                message = data.get("message") if isinstance(data, dict) else None
                self.submit_error = message or DEFAULT_SUBMIT_ERROR
                return self.view

            self.confirmation = {"case_id": self.case_id, "email": self.email}
            self.view = FormView.CONFIRMATION
            return self.view
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Subscription error: {e}")
            self.submit_error = GENERIC_SUBMIT_ERROR
            return self.view
        finally:
            self.is_submitting = False

    def dismiss_upgrade(self) -> None:
        """Close the upgrade prompt and go back to the filled-in form."""
        self.view = FormView.FORM
        self.pricing_url = None

    def reset(self) -> None:
        """Start a new subscription from a blank form."""
        self.case_id = ""
        self.email = ""
        self.errors = {}
        self.is_submitting = False
        self.submit_error = ""
        self.view = FormView.FORM
        self.confirmation = None
        self.pricing_url = None
