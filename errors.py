"""
Captcha verification error hierarchy.

CaptchaError is the base for all typed errors. The verifier never raises
these; it returns them inside a VerificationResult so callers can inspect
the kind of failure:

- RemoteValidationError: the service ran and rejected the challenge
- TransportError: the exchange could not complete
- ProtocolError: non-2xx status or an unparseable reply
"""

from __future__ import annotations

from typing import Any, Optional


class CaptchaError(Exception):
    """Base captcha error. All typed errors inherit from this."""

    error_code: str = "captcha_error"

    def __init__(self, message: str, *, details: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict = {"error": self.message, "code": self.error_code}
        if self.details is not None:
            payload["details"] = self.details
        return payload

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((type(self), self.message, self.error_code))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r})"


class RemoteValidationError(CaptchaError):
    """One entry of the service's ``error-codes`` list."""

    error_code = "remote_validation_error"

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message, details={"code": code})
        self.code = code


class TransportError(CaptchaError):
    error_code = "transport_error"


class ProtocolError(CaptchaError):
    error_code = "protocol_error"
