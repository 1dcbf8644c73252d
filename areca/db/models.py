from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import (
    Boolean,
    Float,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from areca.db.base import Base, TimestampMixin, UTCDateTime, UUIDMixin


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    PAID = "PAID"


class User(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True)
    username: Mapped[str] = mapped_column(String(20), unique=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bio: Mapped[str | None] = mapped_column(String(500), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(500), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, native_enum=False, length=10), default=UserRole.USER
    )
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    sessions: Mapped[list["LoginSession"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    employees: Mapped[list["Employee"]] = relationship(
        back_populates="owner", cascade="all, delete-orphan"
    )
    dispatches: Mapped[list["Dispatch"]] = relationship(
        cascade="all, delete-orphan"
    )
    configurations: Mapped[list["Configuration"]] = relationship(
        cascade="all, delete-orphan"
    )


class LoginSession(UUIDMixin, TimestampMixin, Base):
    """Login session; only the SHA-256 of the bearer token is stored."""

    __tablename__ = "sessions"

    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    token_hash: Mapped[str] = mapped_column(String(64), unique=True)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime())

    user: Mapped[User] = relationship(back_populates="sessions")


class Employee(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "employees"
    __table_args__ = (Index("idx_employees_owner_created", "owner_id", "created_at"),)

    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    name: Mapped[str] = mapped_column(String(100))
    special_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    owner: Mapped[User] = relationship(back_populates="employees")
    work_records: Mapped[list["WorkRecord"]] = relationship(
        back_populates="employee", cascade="all, delete-orphan"
    )
    payments: Mapped[list["Payment"]] = relationship(
        back_populates="employee", cascade="all, delete-orphan"
    )


class WorkRecord(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "work_records"
    __table_args__ = (
        Index("idx_work_records_owner_date", "owner_id", "date"),
        Index("idx_work_records_employee", "employee_id"),
    )

    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    employee_id: Mapped[str] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"))
    kilograms: Mapped[float] = mapped_column(Float)
    date: Mapped[datetime] = mapped_column(UTCDateTime())
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    employee: Mapped[Employee] = relationship(back_populates="work_records")


class Payment(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "payments"
    __table_args__ = (Index("idx_payments_employee_created", "employee_id", "created_at"),)

    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    employee_id: Mapped[str] = mapped_column(ForeignKey("employees.id", ondelete="CASCADE"))
    amount: Mapped[float] = mapped_column(Float)
    status: Mapped[PaymentStatus] = mapped_column(
        SAEnum(PaymentStatus, native_enum=False, length=10), default=PaymentStatus.PENDING
    )
    paid_at: Mapped[datetime | None] = mapped_column(UTCDateTime(), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    employee: Mapped[Employee] = relationship(back_populates="payments")


class Dispatch(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "dispatches"

    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True)
    dispatched_kg: Mapped[float] = mapped_column(Float)
    dispatch_date: Mapped[datetime] = mapped_column(UTCDateTime())
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)


class Configuration(UUIDMixin, TimestampMixin, Base):
    __tablename__ = "configurations"
    __table_args__ = (UniqueConstraint("owner_id", "key", name="uq_configurations_owner_key"),)

    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"))
    key: Mapped[str] = mapped_column(String(100))
    value: Mapped[str] = mapped_column(String(500))
    description: Mapped[str | None] = mapped_column(String(255), nullable=True)
