"""
Installed payment providers.

APP_STORE maps each provider key (the app's directory name, as stored in
apps.dir_name) to the module that defines it. Modules are imported lazily by
the registry on first use; each exposes a module-level ``PROVIDER``.

To install a provider, add its package here:
    "mercadopago": "app.payments.providers.mercadopago",
"""

from typing import Dict

APP_STORE: Dict[str, str] = {
    "stripe": "app.payments.providers.stripe",
    "manual": "app.payments.providers.manual",
    "paypal": "app.payments.providers.paypal",
}

__all__ = ["APP_STORE"]
