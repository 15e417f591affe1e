"""
Reply body returned by the reCAPTCHA ``siteverify`` endpoint.

Absent fields default to empty/false; unknown fields are ignored.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SiteVerifyResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool = False
    challenge_ts: str = ""
    hostname: str = ""
    # Order matters: callers see errors in the order the service reported them
    error_codes: list[str] = Field(default_factory=list, alias="error-codes")
