"""
Modèles SQLAlchemy - Tables projects et contributions
"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Text, Enum, DateTime, Numeric, ForeignKey
)
from sqlalchemy.orm import relationship, declarative_base

Base = declarative_base()

# Montants en unités monétaires, retournés en float côté Python
Money = Numeric(14, 2, asdecimal=False)


class ProjectModel(Base):
    """Modèle SQLAlchemy pour les projets"""
    __tablename__ = "projects"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    goal = Column(Money, nullable=False)
    image_url = Column(String, nullable=True)
    status = Column(
        Enum("active", "completed", "cancelled", name="project_status"),
        default="active",
        nullable=False,
        index=True
    )

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    contributions = relationship(
        "ContributionModel",
        back_populates="project",
        cascade="all, delete-orphan"
    )


class ContributionModel(Base):
    """Modèle SQLAlchemy pour les contributions"""
    __tablename__ = "contributions"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(
        String,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    donor_name = Column(String(255), nullable=False)
    donor_email = Column(String, nullable=True)
    amount = Column(Money, nullable=False)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    project = relationship("ProjectModel", back_populates="contributions")
