from __future__ import annotations

from sqlalchemy import Column, DateTime, String, func

from lockin.database import Base
from lockin.models._ids import new_id


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(512))
    google_id = Column(String(255))
    name = Column(String(255))
    created_at = Column(DateTime, server_default=func.now())
