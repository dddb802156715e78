"""
Database models for dexsearch
SQLAlchemy ORM model for the persisted recent-search list
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class RecentSearch(Base):
    """
    One recent search - position 0 is the most recent
    The whole list is rewritten on every change
    """
    __tablename__ = "recent_searches"

    id = Column(Integer, primary_key=True, autoincrement=True)
    position = Column(Integer, nullable=False, index=True)
    query = Column(String, nullable=False)
    saved_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<RecentSearch(position={self.position}, query='{self.query}')>"
