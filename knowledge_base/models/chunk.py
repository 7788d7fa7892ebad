from sqlalchemy import Column, String, Text, JSON
from knowledge_base.core.database import Base

class Chunk(Base):
    __tablename__ = "chunks"

    id = Column(String, primary_key=True)
    file_path = Column(String, nullable=False, index=True)  # Many chunks share a path
    content = Column(Text, nullable=False)
    embedding = Column(JSON, nullable=False)  # List of floats

    def __repr__(self):
        return f"<Chunk(id={self.id}, file_path={self.file_path})>"
