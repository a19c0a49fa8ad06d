"""
Bird Sightings Backend - Sighting SQLAlchemy Model
===================================================

What:  ORM model representing the `sightings` table.
Who:   Used by SightingRepository for inserts, deletes and filtered scans.

Relationship Design:
    A sighting stores the id of exactly one bird (`bird_id`, NOT NULL). It does
    not own the bird's lifecycle: deleting a sighting never touches its bird.

    `Sighting.bird` is declared with lazy="raise_on_sql". Loading it without an
    explicit join raises instead of silently issuing a query, so every read
    path must load the bird up front (joinedload) before projecting to a DTO.

Query Patterns:
    - By bird:                    WHERE bird_id = :id            (idx_sightings_bird_id)
    - By location:                WHERE location = :loc          (idx_sightings_location)
    - By bird, location, interval WHERE bird_id = :id AND location = :loc
                                  AND date_time BETWEEN :start AND :end
"""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from birdapi.database import Base
from birdapi.models.bird import Bird


class Sighting(Base):
    """
    One observation of a bird at a location and local date-time.

    Sightings are immutable once created; there is no update path.
    """

    __tablename__ = "sightings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    bird_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("birds.id"),
        nullable=False,
        comment="Non-owning reference to birds.id",
    )

    location: Mapped[str] = mapped_column(String(255), nullable=False)

    # Naive timestamp: no timezone is assumed for observations
    date_time: Mapped[datetime] = mapped_column(DateTime(timezone=False), nullable=False)

    bird: Mapped[Bird] = relationship(Bird, lazy="raise_on_sql")

    __table_args__ = (
        Index("idx_sightings_bird_id", "bird_id"),
        Index("idx_sightings_location", "location"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return (
            f"<Sighting(id={self.id}, bird_id={self.bird_id}, "
            f"location='{self.location}', date_time='{self.date_time}')>"
        )
