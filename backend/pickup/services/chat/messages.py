from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from pickup import db
from pickup.exceptions import StoreUnavailable
from pickup.models import ChatMessage, optional_str, utcnow


def save_message(room: str, author: Optional[dict], text: str) -> ChatMessage:
    """Persist a chat message with a server-assigned timestamp."""
    author = author if isinstance(author, dict) else {}
    message = ChatMessage(
        room=room,
        author_id=optional_str(author.get('id')),
        author_name=optional_str(author.get('name')),
        text=text,
        created_at=utcnow(),
    )
    try:
        db.session.add(message)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable('Error saving message') from exc
    return message


def recent_messages(room: str, limit: int) -> List[ChatMessage]:
    """The newest ``limit`` messages of a room, oldest first."""
    try:
        newest_first = (
            ChatMessage.query
            .filter_by(room=room)
            .order_by(ChatMessage.created_at.desc(), ChatMessage.id.desc())
            .limit(limit)
            .all()
        )
    except SQLAlchemyError as exc:
        db.session.rollback()
        raise StoreUnavailable('Error loading messages') from exc
    newest_first.reverse()
    return newest_first