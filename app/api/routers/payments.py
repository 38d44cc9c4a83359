"""
Payments Router - cancel payments at their provider, list installed providers.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.services.payment_service import cancel_payment
from app.database.session import get_db
from app.payments import get_registry

logger = logging.getLogger(__name__)

router = APIRouter()


# ── Schemas ──

class PaymentDeletionResponse(BaseModel):
    payment_id: int
    deleted: bool
    outcome: str
    provider: Optional[str] = None


class ProviderItem(BaseModel):
    key: str
    resolved: bool


class ProviderListResponse(BaseModel):
    providers: List[ProviderItem]


# ── Endpoints ──

@router.get("/providers", response_model=ProviderListResponse)
async def list_providers():
    """List installed payment providers."""
    registry = get_registry()
    return ProviderListResponse(
        providers=[ProviderItem(key=k, resolved=registry.is_resolved(k)) for k in registry.keys()]
    )


@router.delete("/{payment_id}", response_model=PaymentDeletionResponse)
async def delete_payment(
    payment_id: int,
    db: AsyncSession = Depends(get_db),
):
    """
    Delete a payment at its provider.

    ``deleted`` is false when the payment has no app on record, the app does
    not support deletion, or the provider declined; ``outcome`` says which.
    Provider failures surface as 502 and a misconfigured provider as 500.
    """
    result = await cancel_payment(db, payment_id)
    return PaymentDeletionResponse(
        payment_id=payment_id,
        deleted=result.deleted,
        outcome=result.outcome.value,
        provider=result.provider_key,
    )
