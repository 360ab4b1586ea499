"""
Request/response models for the subscription API.
"""
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr


class SubscribeRequest(BaseModel):
    """
    Body of POST /api/subscribe.

    Field presence and format are checked by the subscription service so the
    endpoint can answer with its own messages; only JSON types are enforced here,
    strictly, so "yes" or 1 is not taken for a boolean.
    """
    model_config = ConfigDict(populate_by_name=True)

    case_id: Optional[StrictStr] = Field(default=None, alias="caseId")
    email: Optional[StrictStr] = None
    subscription_date: Optional[datetime] = Field(default=None, alias="subscriptionDate")
    is_active: StrictBool = Field(default=True, alias="isActive")


class SubscribeResponse(BaseModel):
    """Every response from the subscription API carries a message plus at most one flag."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    created: Optional[bool] = None
    updated: Optional[bool] = None
    limit_reached: Optional[bool] = Field(default=None, alias="limitReached")
    error: Optional[str] = None

    def to_body(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
