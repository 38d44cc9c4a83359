from app.payments.base import ProviderLib, ProviderModule
from app.payments.providers.stripe.payment_service import StripePaymentService

PROVIDER = ProviderModule(
    key="stripe",
    name="Stripe",
    lib=ProviderLib(payment_service=StripePaymentService),
)

__all__ = ["PROVIDER", "StripePaymentService"]
