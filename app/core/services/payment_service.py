"""
Payment Service - cancels booking payments at their provider.

Loads the payment and the credential of the app that created it, asks the
dispatcher to delete it at the provider and, once the provider confirms,
removes the payment row. When the provider cannot delete it the row is kept.
"""

import logging
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database.models.credential import Credential
from app.database.models.payment import Payment
from app.payments import (
    DeletionResult,
    PaymentApp,
    PaymentAppCredentials,
    PaymentDispatcher,
    PaymentNotFound,
)

logger = logging.getLogger(__name__)


def build_credentials(credential: Optional[Credential]) -> PaymentAppCredentials:
    """
    Map a stored credential to the value handed to payment providers.

    The credential may be gone, or its app uninstalled; both leave ``app`` None.
    """
    if credential is None:
        return PaymentAppCredentials()

    app = None
    if credential.app is not None:
        app = PaymentApp(
            dir_name=credential.app.dir_name,
            categories=frozenset(credential.app.categories or ()),
        )

    return PaymentAppCredentials(key=credential.key, app_id=credential.app_id, app=app)


async def cancel_payment(
    db: AsyncSession,
    payment_id: Any,
    dispatcher: Optional[PaymentDispatcher] = None,
) -> DeletionResult:
    """
    Delete a payment at its provider and drop it from the database.

    Args:
        db: Database session (caller commits)
        payment_id: Payment primary key
        dispatcher: Dispatcher to use (defaults to the process-wide registry)

    Returns:
        DeletionResult from the dispatcher

    Raises:
        PaymentNotFound: If the payment does not exist
        ProviderNotFound: If the payment's app is not installed
        PaymentProviderError: If the provider failed to delete it
    """
    result = await db.execute(
        select(Payment)
        .where(Payment.id == payment_id)
        .options(selectinload(Payment.credential).selectinload(Credential.app))
        .execution_options(populate_existing=True)
    )
    payment = result.scalar_one_or_none()
    if payment is None:
        raise PaymentNotFound(payment_id)

    credentials = build_credentials(payment.credential)
    deletion = await (dispatcher or PaymentDispatcher()).dispatch_delete(payment.id, credentials)

    if deletion.deleted:
        await db.delete(payment)
        await db.flush()
        logger.info(f"Payment {payment_id} removed after provider deletion")
    else:
        logger.info(f"Payment {payment_id} kept ({deletion.outcome.value})")

    return deletion
