"""
Payment capabilities - types shared by the provider registry and the dispatcher.

A provider module may or may not ship a PaymentService. Absence is modelled
explicitly (ProviderModule.payment_service_factory() returns None) so callers
never have to probe attributes at runtime.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, FrozenSet, Iterable, Mapping, Optional


class AppCategory:
    PAYMENT = "payment"
    CALENDAR = "calendar"
    CONFERENCING = "conferencing"
    AUTOMATION = "automation"
    OTHER = "other"


@dataclass(frozen=True)
class PaymentApp:
    """Installed app that created a payment."""
    dir_name: str
    categories: FrozenSet[str] = field(default_factory=frozenset)


@dataclass(frozen=True)
class PaymentAppCredentials:
    """Credentials of the payment app, handed verbatim to the provider."""
    key: Any = None  # opaque JSON, provider specific
    app_id: Optional[str] = None
    app: Optional[PaymentApp] = None

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, Any]]) -> "PaymentAppCredentials":
        """
        Build credentials from the persisted/JSON shape.

        Accepts both camelCase (appId, dirName) and snake_case keys.
        A missing or null "app" stays None.
        """
        if not data:
            return cls()

        app_data = data.get("app")
        app = None
        if app_data:
            categories: Iterable[str] = app_data.get("categories") or ()
            app = PaymentApp(
                dir_name=app_data.get("dirName", app_data.get("dir_name")),
                categories=frozenset(categories),
            )

        return cls(
            key=data.get("key"),
            app_id=data.get("appId", data.get("app_id")),
            app=app,
        )

    @property
    def provider_key(self) -> Optional[str]:
        return self.app.dir_name if self.app is not None else None


class PaymentService(ABC):
    """Payment capability of a provider. One implementation per provider."""

    def __init__(self, credentials: PaymentAppCredentials):
        self.credentials = credentials

    @abstractmethod
    async def delete_payment(self, payment_id: Any) -> bool:
        """
        Delete (cancel, void, refund... provider decides) a payment.

        Returns:
            True if the provider deleted it, False if it declined.

        Raises:
            PaymentProviderError: provider-side failure, never swallowed here.
        """
        pass


PaymentServiceFactory = Callable[[PaymentAppCredentials], PaymentService]


@dataclass(frozen=True)
class ProviderLib:
    """Capabilities exported by a provider module."""
    payment_service: Optional[PaymentServiceFactory] = None


@dataclass(frozen=True)
class ProviderModule:
    """Resolved unit for a provider key."""
    key: str
    name: str
    lib: Optional[ProviderLib] = None

    def payment_service_factory(self) -> Optional[PaymentServiceFactory]:
        if self.lib is None:
            return None
        return self.lib.payment_service

    @property
    def supports_payment_service(self) -> bool:
        return self.payment_service_factory() is not None
