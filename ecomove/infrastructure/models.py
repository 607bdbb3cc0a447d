"""
SQLAlchemy ORM models  (maps to PostgreSQL).

Tables
------
* ``transports`` -- rentable vehicles and their pricing type
* ``loans``      -- one row per rental

Indexes
-------
* **B-Tree** on ``loans.status``, ``loans.user_id`` and ``loans.transport_id``
  for the active-loan checks done when a rental starts.
* **Partial unique** on ``loans.user_id WHERE status = 'ACTIVE'`` so two
  concurrent starts by one user cannot both commit.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Enum,
    Float,
    ForeignKey,
    Index,
    String,
    func,
    text,
)

from .database import Base
from ecomove.domain.enums import LoanStatus, TransportType


class TransportModel(Base):
    __tablename__ = "transports"

    id = Column(String(36), primary_key=True)
    code = Column(String(32), unique=True, nullable=False)
    transport_type = Column(
        Enum(TransportType, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
    )
    is_available = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (Index("idx_transports_available", "is_available"),)


class LoanModel(Base):
    __tablename__ = "loans"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(64), nullable=False)
    transport_id = Column(String(36), ForeignKey("transports.id"), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=True)
    cost = Column(Float, default=0.0, nullable=False)
    status = Column(Enum(LoanStatus), default=LoanStatus.ACTIVE, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        Index("idx_loans_status", "status"),
        Index("idx_loans_user", "user_id"),
        Index("idx_loans_transport", "transport_id"),
        # At most one ACTIVE loan per user, enforced by the database
        Index(
            "uq_loans_user_active",
            "user_id",
            unique=True,
            postgresql_where=text("status = 'ACTIVE'"),
            sqlite_where=text("status = 'ACTIVE'"),
        ),
    )

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "transport_id": self.transport_id,
            "start_date": self.start_date,
            "end_date": self.end_date,
            "cost": self.cost,
            "status": self.status,
        }
