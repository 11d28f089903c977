"""Pydantic models for movie requests and responses."""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict


class MovieCreate(BaseModel):
    """Model for creating a movie. Unknown fields are dropped."""
    model_config = ConfigDict(extra="ignore")

    title: str
    director: str
    episode_id: Optional[int] = None
    opening_crawl: Optional[str] = None
    producer: Optional[str] = None
    release_date: Optional[str] = None
    species: List[str] = []
    starships: List[str] = []
    vehicles: List[str] = []
    characters: List[str] = []
    planets: List[str] = []
    url: Optional[str] = None


class MovieUpdate(BaseModel):
    """Model for updating a movie. Only provided fields change."""
    title: Optional[str] = None
    director: Optional[str] = None
    episode_id: Optional[int] = None
    opening_crawl: Optional[str] = None
    producer: Optional[str] = None
    release_date: Optional[str] = None
    species: Optional[List[str]] = None
    starships: Optional[List[str]] = None
    vehicles: Optional[List[str]] = None
    characters: Optional[List[str]] = None
    planets: Optional[List[str]] = None
    url: Optional[str] = None


class MovieOut(MovieCreate):
    """Movie information returned to clients."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    created: datetime
    edited: datetime
