# agrimarket/message_manager.py

from typing import List, Optional, Tuple
from .models import Message, User
from .repository import Repository


class MessageManager:
    """Handles the append-only chat log between pairs of users."""

    def __init__(self, messages: Repository[Message]):
        self.messages = messages

    @staticmethod
    def conversation_id(user_id: str, other_id: str) -> str:
        """Same key for both participants, whichever of them is asking."""
        return "-".join(sorted([user_id, other_id]))

    def send_message(self, from_user: User, to_user_id: str, to_user_name: str, content: str) -> Optional[Message]:
        if not content or not content.strip():
            return None

        message = Message(
            chat_id=self.conversation_id(from_user.id, to_user_id),
            sender_id=from_user.id,
            sender_name=from_user.name,
            recipient_id=to_user_id,
            content=content,
        )
        self.messages.insert(message)
        print(f"---MESSAGE MANAGER: {from_user.name} -> {to_user_name} in chat {message.chat_id}---")
        return message

    def get_conversation(self, chat_id: str) -> List[Message]:
        """Messages of one chat in the order they were stored."""
        return self.messages.filter(lambda m: m.chat_id == chat_id)

    def get_conversation_between(self, user_id: str, other_id: str) -> List[Message]:
        return self.get_conversation(self.conversation_id(user_id, other_id))

    def conversations_for(self, user_id: str) -> List[Tuple[str, str, Message]]:
        """(chat_id, other participant id, latest message) for each chat the user is in."""
        latest = {}
        for m in self.messages.filter(lambda m: user_id in (m.sender_id, m.recipient_id)):
            other_id = m.recipient_id if m.sender_id == user_id else m.sender_id
            latest[m.chat_id] = (m.chat_id, other_id, m)
        return list(latest.values())
