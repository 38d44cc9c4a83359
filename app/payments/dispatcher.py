"""
Payment Dispatcher

Routes a payment operation to the provider that created the payment:
resolve the provider module through the registry, check it exposes a
PaymentService and, if so, invoke the operation on a fresh instance.

Missing app metadata and providers without the capability are expected
states: they log a warning and report False. An unknown provider key and any
failure raised by the provider itself propagate to the caller.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from app.payments.base import AppCategory, PaymentAppCredentials
from app.payments.registry import ProviderRegistry, get_registry

logger = logging.getLogger(__name__)


class DeletionOutcome(str, Enum):
    DELETED = "deleted"
    DECLINED = "declined"
    NO_APP = "no_app"
    CAPABILITY_ABSENT = "capability_absent"


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of a dispatched deletion."""
    outcome: DeletionOutcome
    provider_key: Optional[str] = None

    @property
    def deleted(self) -> bool:
        return self.outcome is DeletionOutcome.DELETED

    @property
    def capability_available(self) -> bool:
        return self.outcome in (DeletionOutcome.DELETED, DeletionOutcome.DECLINED)


class PaymentDispatcher:
    """Dispatches payment operations to provider PaymentService implementations."""

    def __init__(self, registry: Optional[ProviderRegistry] = None):
        self._registry = registry

    @property
    def registry(self) -> ProviderRegistry:
        if self._registry is None:
            self._registry = get_registry()
        return self._registry

    async def dispatch_delete(
        self,
        payment_id: Any,
        credentials: Optional[PaymentAppCredentials],
    ) -> DeletionResult:
        """
        Delete a payment at the provider that created it.

        Args:
            payment_id: Payment identifier, passed through to the provider
            credentials: Credentials of the payment app (app may be None)

        Returns:
            DeletionResult describing which branch was taken

        Raises:
            ProviderNotFound: If the app's key is not installed
            Exception: Whatever the provider's delete_payment raises
        """
        key = credentials.provider_key if credentials is not None else None
        if not isinstance(key, str) or not key:
            logger.warning(
                f"Payment {payment_id}: no payment app on record, skipping provider deletion"
            )
            return DeletionResult(DeletionOutcome.NO_APP)

        module = self.registry.resolve(key)

        if not module.supports_payment_service:
            categories = sorted(credentials.app.categories)
            hint = "" if AppCategory.PAYMENT in categories else " (not a payment app)"
            logger.warning(
                f"Payment {payment_id}: payment app service of type '{key}' is not implemented, "
                f"categories={categories}{hint}"
            )
            return DeletionResult(DeletionOutcome.CAPABILITY_ABSENT, key)

        service = module.payment_service_factory()(credentials)
        deleted = await service.delete_payment(payment_id)

        if deleted:
            logger.info(f"Payment {payment_id} deleted by provider '{key}'")
            return DeletionResult(DeletionOutcome.DELETED, key)

        logger.info(f"Payment {payment_id}: provider '{key}' declined deletion")
        return DeletionResult(DeletionOutcome.DECLINED, key)

    async def delete_payment(
        self,
        payment_id: Any,
        credentials: Optional[PaymentAppCredentials],
    ) -> bool:
        """Delete a payment; False when the provider cannot or did not delete it."""
        result = await self.dispatch_delete(payment_id, credentials)
        return result.deleted


async def delete_payment(payment_id: Any, credentials: Optional[PaymentAppCredentials]) -> bool:
    """Delete a payment through the process-wide registry."""
    return await PaymentDispatcher().delete_payment(payment_id, credentials)
