from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    Integer,
    Boolean,
    Text,
    Index,
    UniqueConstraint,
)
from sqlalchemy.sql import func
from .db import Base


class Player(Base):
    __tablename__ = "player"
    id = Column(String, primary_key=True)
    email = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        Index("uq_player_email_lower", func.lower(email), unique=True),
    )


class Versus(Base):
    __tablename__ = "versus"
    id = Column(String, primary_key=True)
    name = Column(String(100), nullable=False)
    type = Column(String(50), nullable=True)  # see config.VERSUS_TYPES
    reverse_ranking = Column(Boolean, nullable=False, default=False)
    created_by = Column(
        String, ForeignKey("player.id", ondelete="CASCADE"), nullable=False
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (Index("ix_versus_created_by", "created_by"),)


class VersusPlayer(Base):
    __tablename__ = "versus_player"
    id = Column(String, primary_key=True)
    versus_id = Column(
        String, ForeignKey("versus.id", ondelete="CASCADE"), nullable=False
    )
    player_id = Column(
        String, ForeignKey("player.id", ondelete="CASCADE"), nullable=False
    )
    is_commissioner = Column(Boolean, nullable=False, default=False)
    nickname = Column(String(50), nullable=True)
    joined_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint(
            "versus_id",
            "player_id",
            name="uq_versus_player_versus_id_player_id",
        ),
        Index("ix_versus_player_player_id", "player_id"),
    )


class Objective(Base):
    __tablename__ = "objective"
    id = Column(String, primary_key=True)
    versus_id = Column(
        String, ForeignKey("versus.id", ondelete="CASCADE"), nullable=False
    )
    title = Column(String(100), nullable=False)
    points = Column(Integer, nullable=False)  # signed; may be 0
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    __table_args__ = (Index("ix_objective_versus_id", "versus_id"),)


class Completion(Base):
    __tablename__ = "completion"
    id = Column(String, primary_key=True)
    versus_id = Column(
        String, ForeignKey("versus.id", ondelete="CASCADE"), nullable=False
    )
    player_id = Column(
        String, ForeignKey("player.id", ondelete="CASCADE"), nullable=False
    )
    objective_id = Column(
        String, ForeignKey("objective.id", ondelete="CASCADE"), nullable=False
    )
    completed_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        Index("ix_completion_versus_id_player_id", "versus_id", "player_id"),
        Index("ix_completion_objective_id", "objective_id"),
    )
