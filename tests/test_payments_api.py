"""
Tests for payment cancellation: DELETE /payments/{id} and the service behind it.

Stripe HTTP calls are stubbed; manual and paypal need no network.
"""

import pytest
from sqlalchemy import select

import app.database.session as db_session_module
from app.core.services.payment_service import build_credentials, cancel_payment
from app.database.models import App, Credential, Payment
from app.payments import DeletionOutcome, PaymentProviderError, ProviderNotFound
from app.payments.providers.stripe import payment_service as stripe_module


async def payment_exists(payment_id):
    async with db_session_module.AsyncSessionLocal() as session:
        result = await session.execute(select(Payment.id).where(Payment.id == payment_id))
        return result.scalar_one_or_none() is not None


class TestDeletePaymentEndpoint:

    async def test_manual_payment_is_deleted(self, test_client, create_payment):
        payment = await create_payment(app_dir_name="manual")

        r = await test_client.delete(f"/payments/{payment.id}")

        assert r.status_code == 200
        assert r.json() == {
            "payment_id": payment.id,
            "deleted": True,
            "outcome": "deleted",
            "provider": "manual",
        }
        assert not await payment_exists(payment.id)

    async def test_payment_without_credential(self, test_client, create_payment):
        payment = await create_payment(with_credential=False)

        r = await test_client.delete(f"/payments/{payment.id}")

        assert r.status_code == 200
        assert r.json()["deleted"] is False
        assert r.json()["outcome"] == "no_app"
        assert await payment_exists(payment.id)

    async def test_credential_of_uninstalled_app(self, test_client, create_payment):
        payment = await create_payment(app_dir_name=None)

        r = await test_client.delete(f"/payments/{payment.id}")

        assert r.status_code == 200
        assert r.json()["outcome"] == "no_app"

    async def test_provider_without_capability(self, test_client, create_payment):
        payment = await create_payment(app_dir_name="paypal", categories=())

        r = await test_client.delete(f"/payments/{payment.id}")

        assert r.status_code == 200
        assert r.json()["deleted"] is False
        assert r.json()["outcome"] == "capability_absent"
        assert r.json()["provider"] == "paypal"
        assert await payment_exists(payment.id)

    async def test_unknown_provider_is_misconfiguration(self, test_client, create_payment):
        payment = await create_payment(app_dir_name="unknown_app")

        r = await test_client.delete(f"/payments/{payment.id}")

        assert r.status_code == 500
        assert r.json()["error"] == "Misconfigured Provider"
        assert r.json()["provider"] == "unknown_app"
        assert await payment_exists(payment.id)

    async def test_provider_failure_is_bad_gateway(self, test_client, create_payment, monkeypatch):
        payment = await create_payment(app_dir_name="stripe", key={"stripe_user_id": "acct_1"})

        def fail(self, payment_intent_id, stripe_account):
            raise PaymentProviderError("stripe", "No such payment_intent", status_code=404)

        monkeypatch.setattr(stripe_module, "STRIPE_PRIVATE_KEY", "sk_test_123")
        monkeypatch.setattr(stripe_module.StripePaymentService, "_cancel_payment_intent", fail)

        r = await test_client.delete(f"/payments/{payment.id}")

        assert r.status_code == 502
        assert r.json()["provider"] == "stripe"
        assert await payment_exists(payment.id)

    async def test_stripe_payment_is_deleted(self, test_client, create_payment, monkeypatch):
        payment = await create_payment(app_dir_name="stripe", key={"stripe_user_id": "acct_1"})
        cancelled = []

        def cancel(self, payment_intent_id, stripe_account):
            cancelled.append((payment_intent_id, stripe_account))

        monkeypatch.setattr(stripe_module, "STRIPE_PRIVATE_KEY", "sk_test_123")
        monkeypatch.setattr(stripe_module.StripePaymentService, "_cancel_payment_intent", cancel)

        r = await test_client.delete(f"/payments/{payment.id}")

        assert r.status_code == 200
        assert r.json()["deleted"] is True
        assert cancelled == [("pi_123", "acct_1")]
        assert not await payment_exists(payment.id)

    async def test_missing_payment_is_404(self, test_client):
        r = await test_client.delete("/payments/9999")
        assert r.status_code == 404


class TestListProviders:

    async def test_lists_installed_providers(self, test_client):
        r = await test_client.get("/payments/providers")

        assert r.status_code == 200
        keys = {p["key"] for p in r.json()["providers"]}
        assert keys == {"stripe", "manual", "paypal"}
        assert all(p["resolved"] is False for p in r.json()["providers"])

    async def test_resolved_flag_after_dispatch(self, test_client, create_payment):
        payment = await create_payment(app_dir_name="manual")
        await test_client.delete(f"/payments/{payment.id}")

        r = await test_client.get("/payments/providers")

        resolved = {p["key"]: p["resolved"] for p in r.json()["providers"]}
        assert resolved["manual"] is True
        assert resolved["stripe"] is False


class TestCancelPaymentService:

    async def test_build_credentials_from_stored_credential(self):
        credential = Credential(
            type="stripe_payment",
            key={"stripe_user_id": "acct_1"},
            app_id="stripe",
        )
        credential.app = App(slug="stripe", dir_name="stripe", categories=["payment"])

        credentials = build_credentials(credential)

        assert credentials.key == {"stripe_user_id": "acct_1"}
        assert credentials.app_id == "stripe"
        assert credentials.app.dir_name == "stripe"
        assert credentials.app.categories == frozenset({"payment"})

    async def test_build_credentials_without_credential(self):
        credentials = build_credentials(None)
        assert credentials.app is None
        assert credentials.key is None

    async def test_cancel_keeps_row_when_capability_absent(self, db_session, create_payment):
        payment = await create_payment(app_dir_name="paypal")

        result = await cancel_payment(db_session, payment.id)
        await db_session.commit()

        assert result.outcome is DeletionOutcome.CAPABILITY_ABSENT
        assert await payment_exists(payment.id)

    async def test_cancel_unknown_provider_raises(self, db_session, create_payment):
        payment = await create_payment(app_dir_name="unknown_app")

        with pytest.raises(ProviderNotFound):
            await cancel_payment(db_session, payment.id)
