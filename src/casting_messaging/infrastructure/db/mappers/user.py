from __future__ import annotations

from casting_messaging.domain.entities.user import User
from casting_messaging.infrastructure.db.models.user import UserModel


def model_to_entity(model: UserModel) -> User:
    return User(
        id=model.id,
        email=model.email,
        first_name=model.first_name,
        last_name=model.last_name,
        role=model.role,
    )
