"""Payment errors raised by the registry, the dispatcher and providers."""

from typing import Any, Optional


class PaymentError(Exception):
    """Base class for payment errors."""


class ProviderNotFound(PaymentError, LookupError):
    """Provider key is not installed in the registry (misconfiguration)."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Payment provider '{key}' is not installed")


class PaymentNotFound(PaymentError, LookupError):
    def __init__(self, payment_id: Any):
        self.payment_id = payment_id
        super().__init__(f"Payment {payment_id} not found")


class PaymentProviderError(PaymentError):
    """A provider operation failed (network, auth, provider-side rejection)."""

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None):
        self.provider = provider
        self.status_code = status_code
        detail = f"[{provider}] {message}"
        if status_code is not None:
            detail = f"{detail} (HTTP {status_code})"
        super().__init__(detail)
