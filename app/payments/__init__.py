"""
Payment providers - registry of installed payment apps and dispatch to them.

Usage:
    from app.payments import PaymentAppCredentials, delete_payment

    deleted = await delete_payment(payment.id, credentials)

Providers are listed in app.payments.providers.APP_STORE and loaded lazily
by the registry the first time a payment of theirs is handled.
"""

from app.payments.base import (
    AppCategory,
    PaymentApp,
    PaymentAppCredentials,
    PaymentService,
    ProviderLib,
    ProviderModule,
)
from app.payments.dispatcher import (
    DeletionOutcome,
    DeletionResult,
    PaymentDispatcher,
    delete_payment,
)
from app.payments.exceptions import (
    PaymentError,
    PaymentNotFound,
    PaymentProviderError,
    ProviderNotFound,
)
from app.payments.registry import ProviderRegistry, get_registry

__all__ = [
    "delete_payment",
    "get_registry",
    "AppCategory",
    "DeletionOutcome",
    "DeletionResult",
    "PaymentApp",
    "PaymentAppCredentials",
    "PaymentDispatcher",
    "PaymentError",
    "PaymentNotFound",
    "PaymentProviderError",
    "PaymentService",
    "ProviderLib",
    "ProviderModule",
    "ProviderNotFound",
    "ProviderRegistry",
]
