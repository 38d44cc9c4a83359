"""Credential model - authorization data for an installed app (API keys, OAuth tokens)."""

from typing import Any, Optional

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.models.model_base import JSONType, SqlAlchemyModel


class Credential(SqlAlchemyModel):
    __tablename__ = "credentials"

    type: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
    )  # e.g. "stripe_payment"

    key: Mapped[Any] = mapped_column(JSONType, nullable=True)

    # Nullable: the app may be uninstalled while its credentials remain
    app_id: Mapped[Optional[str]] = mapped_column(
        ForeignKey("apps.slug", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    app = relationship("App", back_populates="credentials", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Credential id={self.id} type={self.type} app_id={self.app_id}>"
