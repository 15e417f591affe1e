"""Google reCAPTCHA implementation of CaptchaVerifier.

- one POST per call through HttpClient, bounded by a 10-second overall deadline
- every failure path returns a VerificationResult instead of raising
- the endpoint is injectable so tests can target a stand-in service
"""

from __future__ import annotations

import asyncio
from types import MappingProxyType
from typing import Any, Mapping, Optional

import httpx
from pydantic import ValidationError

from config import DEFAULT_VERIFY_URL, RecaptchaSettings
from errors import ProtocolError, RemoteValidationError, TransportError
from infrastructure.captcha.protocol import VerificationResult
from infrastructure.http_client import HttpClient
from schemas.dto.responses.siteverify import SiteVerifyResponse
from shared.ip_utils import normalize_remote_ip
from shared.logging import get_logger, hash_ip

log = get_logger(__name__)

RECAPTCHA_ERROR_MESSAGES: Mapping[str, str] = MappingProxyType(
    {
        "missing-input-secret": "The secret parameter is missing.",
        "invalid-input-secret": "The secret parameter is invalid or malformed.",
        "missing-input-response": "The response parameter is missing.",
        "invalid-input-response": "The response parameter is invalid or malformed.",
        "bad-request": "The request is invalid or malformed.",
        "timeout-or-duplicate": (
            "The response is no longer valid: either is too old "
            "or has been used previously."
        ),
    }
)


def describe_error_code(code: str) -> RemoteValidationError:
    """Map a service error code to an error; unknown codes get an empty message."""
    return RemoteValidationError(code, RECAPTCHA_ERROR_MESSAGES.get(code, ""))


def build_verify_form(
    secret: str, response: str, remote_ip: Optional[str] = None
) -> dict[str, str]:
    """Form fields for the siteverify POST.

    Empty values are left out so the service reports them as missing.
    """
    form: dict[str, str] = {}
    if secret:
        form["secret"] = secret
    if response:
        form["response"] = response
    ip = normalize_remote_ip(remote_ip)
    if ip is not None:
        form["remoteip"] = ip
    elif remote_ip:
        log.debug("recaptcha_remote_ip_ignored", remote_ip=remote_ip[:64])
    return form


class RecaptchaVerifier:
    def __init__(
        self,
        http_client: Optional[HttpClient] = None,
        *,
        verify_url: str = DEFAULT_VERIFY_URL,
        timeout: float = 10.0,
    ) -> None:
        self._owns_client = http_client is None
        self._http = http_client or HttpClient(timeout=timeout)
        self._verify_url = verify_url
        # Deadline for the whole exchange; httpx's own timeout is per phase
        self._timeout = timeout

    @classmethod
    def from_settings(
        cls, settings: RecaptchaSettings, http_client: Optional[HttpClient] = None
    ) -> "RecaptchaVerifier":
        return cls(
            http_client,
            verify_url=settings.recaptcha_verify_url,
            timeout=settings.recaptcha_timeout_seconds,
        )

    async def verify(
        self, secret: str, response: str, remote_ip: Optional[str] = None
    ) -> VerificationResult:
        form = build_verify_form(secret, response, remote_ip)
        try:
            http_response = await asyncio.wait_for(
                self._http.post(self._verify_url, data=form), timeout=self._timeout
            )
        except asyncio.TimeoutError:
            log.error(
                "recaptcha_request_timed_out",
                timeout=self._timeout,
                verify_url=self._verify_url,
            )
            return VerificationResult(
                False,
                [
                    TransportError(
                        "Verification service did not answer within "
                        f"{self._timeout:g}s",
                        details={"error_type": "TimeoutError"},
                    )
                ],
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            log.error(
                "recaptcha_request_failed",
                error=str(e),
                error_type=type(e).__name__,
                verify_url=self._verify_url,
            )
            return VerificationResult(
                False,
                [
                    TransportError(
                        f"Could not reach the verification service: {e}",
                        details={"error_type": type(e).__name__},
                    )
                ],
            )
        except UnicodeEncodeError as e:
            log.error("recaptcha_form_unencodable", error_type=type(e).__name__)
            return VerificationResult(
                False,
                [
                    ProtocolError(
                        "Verification parameters could not be encoded as UTF-8.",
                        details={"error_type": type(e).__name__},
                    )
                ],
            )

        if not http_response.is_success:
            log.error(
                "recaptcha_api_error",
                status_code=http_response.status_code,
                response_text=http_response.text[:200],
            )
            return VerificationResult(
                False,
                [
                    ProtocolError(
                        "Unexpected HTTP status from the verification service: "
                        f"{http_response.status_code}",
                        details={"status_code": http_response.status_code},
                    )
                ],
            )

        try:
            reply = SiteVerifyResponse.model_validate_json(http_response.content)
        except ValidationError as e:
            log.error(
                "recaptcha_invalid_reply",
                error_count=e.error_count(),
                response_text=http_response.text[:200],
            )
            return VerificationResult(
                False,
                [
                    ProtocolError(
                        "Malformed reply from the verification service.",
                        details={"status_code": http_response.status_code},
                    )
                ],
            )

        errors = [describe_error_code(code) for code in reply.error_codes]
        success = reply.success and not errors
        if not success:
            log.warning(
                "recaptcha_verification_failed",
                error_codes=reply.error_codes,
                hostname=reply.hostname,
                remote_ip=hash_ip(form.get("remoteip")),
            )
        return VerificationResult(success, errors)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self) -> "RecaptchaVerifier":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()
