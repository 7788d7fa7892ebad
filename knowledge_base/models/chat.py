from sqlalchemy import Column, String, DateTime, ForeignKey
from knowledge_base.core.database import Base
from knowledge_base.models.types import JSONText

class Chat(Base):
    __tablename__ = "chats"

    id = Column(String, primary_key=True)  # Supplied by the client
    author = Column(String(64), ForeignKey("users.email"), nullable=False, index=True)

    # Full message history, serialized as JSON text
    messages = Column(JSONText, nullable=False)

    # Set once on insert; updates only touch messages
    created_at = Column(DateTime(timezone=True), nullable=False, index=True)

    def __repr__(self):
        return f"<Chat(id={self.id}, author={self.author})>"
