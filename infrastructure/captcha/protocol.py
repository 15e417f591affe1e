"""CaptchaVerifier protocol: request handlers depend on this, not the concrete implementation."""

from typing import NamedTuple, Optional, Protocol, runtime_checkable

from errors import CaptchaError, ProtocolError, TransportError


class VerificationResult(NamedTuple):
    success: bool
    errors: list[CaptchaError]

    @property
    def failed_locally(self) -> bool:
        """True when verification could not be performed at all.

        Distinguishes an inconclusive attempt (transport/protocol failure)
        from the service rejecting the challenge.
        """
        return any(isinstance(e, (TransportError, ProtocolError)) for e in self.errors)


@runtime_checkable
class CaptchaVerifier(Protocol):
    async def verify(
        self, secret: str, response: str, remote_ip: Optional[str] = None
    ) -> VerificationResult: ...
