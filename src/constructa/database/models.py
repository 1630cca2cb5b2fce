"""SQLAlchemy models for constructa database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Project(Base):
    """Construction project model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False, default="")
    start_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="ACTIVE")
    distribution_type = Column(String, nullable=False, default="PERCENTAGE")
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    partners = relationship("Partner", back_populates="project", cascade="all, delete-orphan")
    suppliers = relationship("Supplier", back_populates="project", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="project", cascade="all, delete-orphan")
    forecasts = relationship("BudgetForecast", back_populates="project", cascade="all, delete-orphan")


class Partner(Base):
    """Partner (co-investor) model."""

    __tablename__ = "partners"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, default="")
    phone = Column(String, nullable=True)
    percentage = Column(Numeric(5, 2), nullable=True)
    fixed_value = Column(Numeric(12, 2), nullable=True)

    # Relationships
    project = relationship("Project", back_populates="partners")


class Supplier(Base):
    """Supplier model."""

    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    name = Column(String, nullable=False)
    document = Column(String, nullable=True)
    contact = Column(String, nullable=True)
    default_category = Column(String, nullable=True)

    __table_args__ = (UniqueConstraint("project_id", "name", name="uq_project_supplier_name"),)

    # Relationships
    project = relationship("Project", back_populates="suppliers")


class Transaction(Base):
    """Ledger entry model.

    payer_id and beneficiary_id are plain integers, not foreign keys:
    deleting a partner keeps their historical entries.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    type = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False, default="")
    payer_type = Column(String, nullable=False, default="BOX")
    payer_id = Column(Integer, nullable=True)
    beneficiary_id = Column(Integer, nullable=True)
    category = Column(String, nullable=True)
    stage = Column(String, nullable=True)
    supplier = Column(String, nullable=True)
    payment_method = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    project = relationship("Project", back_populates="transactions")


class BudgetForecast(Base):
    """Monthly budget goal model."""

    __tablename__ = "budget_forecasts"

    id = Column(Integer, primary_key=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False)
    month = Column(String(7), nullable=False)
    total_amount = Column(Numeric(12, 2), nullable=False)
    notes = Column(String, nullable=True)

    # At most one forecast per project and month
    __table_args__ = (UniqueConstraint("project_id", "month", name="uq_project_month"),)

    # Relationships
    project = relationship("Project", back_populates="forecasts")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
