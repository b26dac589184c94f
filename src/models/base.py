"""
Base model configuration for SQLAlchemy ORM.

This module defines the base declarative class that the catalog's tables
inherit from.

Usage:
    from src.models.base import Base

    class MyModel(Base):
        __tablename__ = "my_table"

        id = Column(String, primary_key=True)
        name = Column(String)
"""

from sqlalchemy.orm import declarative_base

Base = declarative_base()
