"""Payment model - payment taken for a booking through a payment app."""

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.models.model_base import JSONType, SqlAlchemyModel


class Payment(SqlAlchemyModel):
    __tablename__ = "payments"

    uid: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
    )
    booking_id: Mapped[Optional[int]] = mapped_column(Integer, index=True)

    app_id: Mapped[Optional[str]] = mapped_column(String(100))  # slug of the payment app
    credential_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("credentials.id", ondelete="SET NULL"),
        nullable=True,
    )

    amount: Mapped[int] = mapped_column(Integer, nullable=False)  # smallest currency unit
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="usd")

    success: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    refunded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    external_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)
    data: Mapped[dict] = mapped_column(
        JSONType,
        default=dict,
        nullable=False,
    )  # provider specific, e.g. {"stripeAccount": "acct_..."}

    credential = relationship("Credential", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Payment id={self.id} uid={self.uid} app_id={self.app_id} success={self.success}>"
