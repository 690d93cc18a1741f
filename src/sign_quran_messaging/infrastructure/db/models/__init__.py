"""Import all models so metadata.create_all can discover them via Base.metadata."""
from sign_quran_messaging.infrastructure.db.models.message import MessageModel
from sign_quran_messaging.infrastructure.db.models.outbox import OutboxMessageModel
from sign_quran_messaging.infrastructure.db.models.user import UserModel

__all__ = [
    "MessageModel",
    "OutboxMessageModel",
    "UserModel",
]
