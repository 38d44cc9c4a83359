"""
Manual Payment Service - admin confirms payments in the system.

No gateway integration: the client paid by transfer or cash and an admin
confirmed it. There is nothing held at a gateway to cancel, so deleting a
payment always succeeds; refunds, if any, are handled by the admin.
"""

import logging
from typing import Any

from app.payments.base import PaymentService

logger = logging.getLogger(__name__)


class ManualPaymentService(PaymentService):
    """Provider that does not integrate with a gateway."""

    async def delete_payment(self, payment_id: Any) -> bool:
        logger.info(f"Manual payment {payment_id} released; refund (if any) must be settled by an admin")
        return True
