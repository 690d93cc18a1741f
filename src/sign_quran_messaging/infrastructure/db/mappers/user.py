from __future__ import annotations

from sign_quran_messaging.domain.entities.user import User
from sign_quran_messaging.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        name=model.name,
        email=model.email,
        role=model.role,
    )
