"""
Association tables for many-to-many relationships.
Kept separate to avoid circular imports between models.
"""
from sqlalchemy import Column, Integer, Table, ForeignKey, DateTime, func
from app.models.base import Base

association_admins = Table(
    'association_admins',
    Base.metadata,
    Column('user_id', Integer, ForeignKey('users.id', ondelete='CASCADE'), primary_key=True),
    Column('association_id', Integer, ForeignKey('associations.id', ondelete='CASCADE'), primary_key=True),
    Column('granted_at', DateTime(timezone=True), server_default=func.now(), nullable=False)
)
