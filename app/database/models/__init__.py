"""Database models package - import all models so metadata.create_all discovers them."""

from app.database.models.model_base import SqlAlchemyModel
from app.database.models.installed_app import App
from app.database.models.credential import Credential
from app.database.models.payment import Payment

__all__ = [
    "SqlAlchemyModel",
    "App",
    "Credential",
    "Payment",
]
