"""App model - a third-party app installed in the application (payment gateways, calendars...)."""

from typing import List

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database.models.model_base import JSONType, SqlAlchemyModel


class App(SqlAlchemyModel):
    __tablename__ = "apps"

    slug: Mapped[str] = mapped_column(
        String(100),
        unique=True,
        nullable=False,
        index=True,
    )
    # Directory name of the provider package; used as the registry key
    dir_name: Mapped[str] = mapped_column(String(100), nullable=False)

    categories: Mapped[List[str]] = mapped_column(
        JSONType,
        default=list,
        nullable=False,
    )  # payment, calendar, conferencing, ...

    enabled: Mapped[bool] = mapped_column(
        Boolean,
        default=True,
        nullable=False,
    )

    credentials = relationship("Credential", back_populates="app")

    def __repr__(self) -> str:
        return f"<App slug={self.slug} dir_name={self.dir_name}>"
