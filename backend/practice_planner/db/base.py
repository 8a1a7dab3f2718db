from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .session import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    # Stored naive; every datetime column holds UTC
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Club(Base):
    """Identity root owning resources, dogs and practices"""

    __tablename__ = "clubs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self):
        return f"<Club(id={self.id}, name='{self.name}')>"


class Dog(Base):
    """Dog belonging to a club, referenced by set assignments and attendance"""

    __tablename__ = "dogs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    club_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self):
        return f"<Dog(id={self.id}, name='{self.name}')>"


class Resource(Base):
    """Location or room of a club; exactly one per club is the default"""

    __tablename__ = "resources"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    club_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_default: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    def __repr__(self):
        return f"<Resource(id={self.id}, name='{self.name}', is_default={self.is_default})>"


class Practice(Base):
    """Scheduled practice session of a club"""

    __tablename__ = "practices"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    club_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("clubs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    scheduled_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Draft")
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    sets: Mapped[List["PracticeSet"]] = relationship(
        back_populates="practice", cascade="all, delete-orphan"
    )
    attendances: Mapped[List["PracticeAttendance"]] = relationship(
        back_populates="practice", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Practice(id={self.id}, status='{self.status}')>"


class PracticeSet(Base):
    """Ordered group of dog assignments within a practice, bound to one resource"""

    __tablename__ = "sets"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    practice_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("practices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    resource_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("resources.id"), nullable=False, index=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Tie-breaker for equal orders: position of the row in insertion sequence
    insertion_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=_utcnow)

    practice: Mapped[Practice] = relationship(back_populates="sets")
    set_dogs: Mapped[List["SetDog"]] = relationship(
        back_populates="practice_set", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<PracticeSet(id={self.id}, order={self.order})>"


class SetDog(Base):
    """Dog assigned to a lane of a set"""

    __tablename__ = "setdogs"

    set_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sets.id", ondelete="CASCADE"), primary_key=True
    )
    dog_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("dogs.id", ondelete="CASCADE"), primary_key=True
    )
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    lane: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    insertion_seq: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=_utcnow)

    practice_set: Mapped[PracticeSet] = relationship(back_populates="set_dogs")

    def __repr__(self):
        return f"<SetDog(set_id={self.set_id}, dog_id={self.dog_id}, order={self.order})>"


class PracticeAttendance(Base):
    """Attendance of one dog at one practice; unique per (practice, dog) by lookup"""

    __tablename__ = "practice_attendance"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    practice_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("practices.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    dog_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("dogs.id", ondelete="CASCADE"), nullable=False
    )
    # 0 = Unknown, 1 = No, 2 = Yes
    attending: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, default=_utcnow)
    updated_at: Mapped[Optional[datetime]] = mapped_column(
        DateTime, default=_utcnow, onupdate=_utcnow
    )

    practice: Mapped[Practice] = relationship(back_populates="attendances")

    def __repr__(self):
        return (
            f"<PracticeAttendance(practice_id={self.practice_id}, "
            f"dog_id={self.dog_id}, attending={self.attending})>"
        )
