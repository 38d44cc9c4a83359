from app.payments.base import ProviderLib, ProviderModule
from app.payments.providers.manual.payment_service import ManualPaymentService

PROVIDER = ProviderModule(
    key="manual",
    name="Manual",
    lib=ProviderLib(payment_service=ManualPaymentService),
)

__all__ = ["PROVIDER", "ManualPaymentService"]
