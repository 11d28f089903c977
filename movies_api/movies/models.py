"""
Movie model.

Field names follow the external films API so synchronized records can be
stored as fetched.
"""
from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, JSON
from movies_api.database import Base


class Movie(Base):
    """A film of the catalogue."""
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    episode_id = Column(Integer, unique=True, index=True, nullable=True)
    opening_crawl = Column(Text, nullable=True)
    director = Column(String, nullable=False)
    producer = Column(String, nullable=True)
    release_date = Column(String, nullable=True)
    species = Column(JSON, default=list)
    starships = Column(JSON, default=list)
    vehicles = Column(JSON, default=list)
    characters = Column(JSON, default=list)
    planets = Column(JSON, default=list)
    url = Column(String, nullable=True)
    created = Column(DateTime, default=datetime.utcnow, nullable=False)
    edited = Column(DateTime, default=datetime.utcnow, nullable=False)
