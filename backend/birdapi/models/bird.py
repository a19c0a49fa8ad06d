"""
Bird Sightings Backend - Bird SQLAlchemy Model
===============================================

What:  ORM model representing the `birds` table.
Who:   Used by BirdRepository for CRUD and filtered scans.

Table Design:
    - Integer identity primary key, assigned by the database on insert and
      never reused (SQLite tables are declared AUTOINCREMENT for this)
    - name/color: exact-match query columns, indexed together
    - weight/height: positive reals; positivity is checked at the API schema
    - No outward relationships: sightings point at birds, never the reverse
"""

from sqlalchemy import Float, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from birdapi.database import Base


class Bird(Base):
    """A bird species record that sightings refer to by id."""

    __tablename__ = "birds"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Identity assigned on creation; immutable",
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    color: Mapped[str] = mapped_column(String(255), nullable=False)

    weight: Mapped[float] = mapped_column(Float, nullable=False)
    height: Mapped[float] = mapped_column(Float, nullable=False)

    # name-only and name+color queries both use this index's leading column
    __table_args__ = (
        Index("idx_birds_name_color", "name", "color"),
        {"sqlite_autoincrement": True},
    )

    def __repr__(self) -> str:
        return f"<Bird(id={self.id}, name='{self.name}', color='{self.color}')>"
