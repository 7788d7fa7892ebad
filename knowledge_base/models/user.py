from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from knowledge_base.core.database import Base

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(64), unique=True, index=True, nullable=False)
    password = Column(String(128), nullable=False)  # bcrypt hash, never the plaintext
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email})>"
