"""
PayPal - collects the payment method at booking time.

Captures and cancellations happen on PayPal's side, so this provider exports
no PaymentService and payment deletion is a no-op for it.
"""

from app.payments.base import ProviderModule

PROVIDER = ProviderModule(key="paypal", name="PayPal")
