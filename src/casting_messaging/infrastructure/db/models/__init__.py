"""Import all models so Base.metadata knows every table."""
from casting_messaging.infrastructure.db.models.conversation import ConversationModel
from casting_messaging.infrastructure.db.models.message import MessageModel
from casting_messaging.infrastructure.db.models.participant import ParticipantModel
from casting_messaging.infrastructure.db.models.user import UserModel

__all__ = [
    "ConversationModel",
    "MessageModel",
    "ParticipantModel",
    "UserModel",
]
