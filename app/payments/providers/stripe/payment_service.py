"""
Stripe Payment Service - payments taken through Stripe Connect.

Deleting a payment expires every open Checkout Session of its PaymentIntent
and then cancels the PaymentIntent on the organizer's connected account.

Environment:
- STRIPE_PRIVATE_KEY: platform secret key (sk_...)
- STRIPE_API_BASE: API base URL (default https://api.stripe.com/v1)

Credential key (stored in credentials.key):
    {"stripe_user_id": "acct_...", "stripe_publishable_key": "pk_...", ...}
"""

import asyncio
import logging
import os
from typing import Any, Dict, Optional

import requests
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.database import session as db_session
from app.database.models.payment import Payment
from app.payments.base import PaymentAppCredentials, PaymentService
from app.payments.exceptions import PaymentNotFound, PaymentProviderError

logger = logging.getLogger(__name__)

STRIPE_PRIVATE_KEY = os.getenv("STRIPE_PRIVATE_KEY")
STRIPE_API_BASE = os.getenv("STRIPE_API_BASE", "https://api.stripe.com/v1")
STRIPE_TIMEOUT = 30


class StripePaymentService(PaymentService):
    """
    PaymentService for Stripe.

    Args:
        credentials: Payment app credentials; ``key["stripe_user_id"]`` is the
            fallback connected account
        api_key: Secret key override (defaults to STRIPE_PRIVATE_KEY)
        session_factory: Async session factory used to look payments up
            (defaults to app.database.session.AsyncSessionLocal)
        http: requests.Session to use for API calls; when omitted each
            deletion opens its own session and closes it afterwards
    """

    def __init__(
        self,
        credentials: PaymentAppCredentials,
        api_key: Optional[str] = None,
        session_factory: Optional[async_sessionmaker[AsyncSession]] = None,
        http: Optional[requests.Session] = None,
    ):
        super().__init__(credentials)
        key = credentials.key if isinstance(credentials.key, dict) else {}
        self.stripe_user_id: Optional[str] = key.get("stripe_user_id")
        self.api_key = api_key or STRIPE_PRIVATE_KEY
        self.base_url = STRIPE_API_BASE.rstrip("/")
        self._session_factory = session_factory
        self._http = http

    async def delete_payment(self, payment_id: Any) -> bool:
        payment = await self._get_payment(payment_id)
        if payment is None:
            raise PaymentNotFound(payment_id)

        if not payment.external_id:
            # Checkout never reached Stripe; nothing to cancel there
            logger.warning(f"Stripe payment {payment_id} has no PaymentIntent, skipping")
            return False

        stripe_account = (payment.data or {}).get("stripeAccount") or self.stripe_user_id
        if not stripe_account:
            raise PaymentProviderError("stripe", f"Stripe account not found for payment {payment_id}")
        if not self.api_key:
            raise PaymentProviderError("stripe", "STRIPE_PRIVATE_KEY is not configured")

        await asyncio.to_thread(self._cancel_payment_intent, payment.external_id, stripe_account)
        logger.info(f"Stripe PaymentIntent {payment.external_id} cancelled (payment {payment_id})")
        return True

    async def _get_payment(self, payment_id: Any) -> Optional[Payment]:
        session_factory = self._session_factory or db_session.AsyncSessionLocal
        async with session_factory() as session:
            return await session.get(Payment, payment_id)

    def _cancel_payment_intent(self, payment_intent_id: str, stripe_account: str) -> None:
        """Expire open checkout sessions, then cancel the PaymentIntent. Runs in a worker thread."""
        if self._http is not None:
            self._cancel_with(self._http, payment_intent_id, stripe_account)
            return

        with requests.Session() as http:
            self._cancel_with(http, payment_intent_id, stripe_account)

    def _cancel_with(self, http: requests.Session, payment_intent_id: str, stripe_account: str) -> None:
        sessions = self._request(
            http,
            "GET",
            "/checkout/sessions",
            stripe_account,
            params={"payment_intent": payment_intent_id},
        )
        for checkout_session in sessions.get("data", []):
            if checkout_session.get("status") == "open":
                self._request(http, "POST", f"/checkout/sessions/{checkout_session['id']}/expire", stripe_account)

        self._request(http, "POST", f"/payment_intents/{payment_intent_id}/cancel", stripe_account)

    def _request(
        self,
        http: requests.Session,
        method: str,
        path: str,
        stripe_account: str,
        params: Optional[Dict[str, str]] = None,
    ) -> Dict[str, Any]:
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Stripe-Account": stripe_account,
        }
        try:
            response = http.request(
                method,
                f"{self.base_url}{path}",
                headers=headers,
                params=params,
                timeout=STRIPE_TIMEOUT,
            )
        except requests.RequestException as e:
            raise PaymentProviderError("stripe", f"Network error {method} {path}: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.status_code >= 400:
            message = None
            if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
                message = payload["error"].get("message")
            raise PaymentProviderError(
                "stripe",
                f"{method} {path}: {message or response.text}",
                response.status_code,
            )

        if not isinstance(payload, dict):
            # e.g. an HTML page from a proxy in front of the API
            raise PaymentProviderError(
                "stripe",
                f"{method} {path}: unexpected response body",
                response.status_code,
            )
        return payload
