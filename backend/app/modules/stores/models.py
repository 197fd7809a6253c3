from sqlalchemy import Boolean, Column, DateTime, Integer, String

from app.db import Base
from app.modules.auth.deps import NowUtc


class Store(Base):
    __tablename__ = "stores"
    __table_args__ = {"schema": "inventory"}

    Id = Column("id", Integer, primary_key=True, index=True)
    Name = Column("name", String(200), nullable=False, index=True)
    Address = Column("address", String(400))
    Phone = Column("phone", String(50))
    Website = Column("website", String(400))
    IsActive = Column("is_active", Boolean, nullable=False, default=True)
    CreatedAt = Column("created_at", DateTime(timezone=True), default=NowUtc, nullable=False)
    UpdatedAt = Column("updated_at", DateTime(timezone=True), default=NowUtc, nullable=False)
    CreatedBy = Column("created_by", String(64), nullable=False, index=True)
    UpdatedBy = Column("updated_by", String(64), nullable=False)
