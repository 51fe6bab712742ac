"""SQLAlchemy models for taxfiler database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    String,
    DateTime,
    Date,
    Numeric,
    Boolean,
    Integer,
    JSON,
    Index,
    create_engine,
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()

ID = String(36)


class Income(Base):
    """Income model."""

    __tablename__ = "incomes"

    id = Column(ID, primary_key=True)
    business_id = Column(ID, nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False)
    category = Column(String, nullable=False)
    reference = Column(String, nullable=True)
    bank_transaction_ref = Column(String, nullable=True)
    invoice_number = Column(String, nullable=True)
    receipt_path = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    deletion_reason = Column(String, nullable=True)

    __table_args__ = (Index("ix_incomes_business_date", "business_id", "date"),)


class Expense(Base):
    """Expense model. Amounts are stored as positive values."""

    __tablename__ = "expenses"

    id = Column(ID, primary_key=True)
    business_id = Column(ID, nullable=False)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False)
    category = Column(String, nullable=False)
    receipt_path = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    bank_transaction_ref = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    deletion_reason = Column(String, nullable=True)

    __table_args__ = (Index("ix_expenses_business_date", "business_id", "date"),)


class BankTransaction(Base):
    """Staged bank transaction model for the review workflow."""

    __tablename__ = "bank_transactions"

    id = Column(ID, primary_key=True)
    business_id = Column(ID, nullable=False)
    import_audit_id = Column(ID, nullable=False)
    source_format_id = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False)
    account_last_four = Column(String(4), nullable=True)
    bank_transaction_id = Column(String, nullable=True)
    transaction_hash = Column(String(64), nullable=False)
    review_status = Column(String, nullable=False)
    income_id = Column(ID, nullable=True)
    expense_id = Column(ID, nullable=True)
    exclusion_reason = Column(String, nullable=True)
    business_flag = Column(String, nullable=False)
    confidence_score = Column(Numeric(4, 2), nullable=True)
    suggested_category = Column(String, nullable=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)
    deleted_at = Column(DateTime, nullable=True)
    deleted_by = Column(String, nullable=True)
    deletion_reason = Column(String, nullable=True)

    __table_args__ = (
        Index("ix_bank_transactions_business_date", "business_id", "date"),
        Index("ix_bank_transactions_hash", "business_id", "transaction_hash"),
    )


class ImportAudit(Base):
    """Import audit trail model."""

    __tablename__ = "import_audits"

    id = Column(ID, primary_key=True)
    business_id = Column(ID, nullable=False)
    import_timestamp = Column(DateTime, nullable=False)
    file_name = Column(String, nullable=False)
    file_hash = Column(String(64), nullable=True)
    import_type = Column(String, nullable=False)
    total_records = Column(Integer, nullable=False)
    imported_count = Column(Integer, nullable=False)
    skipped_count = Column(Integer, nullable=False)
    record_ids = Column(JSON, nullable=False, default=list)
    status = Column(String, nullable=False)
    undone_at = Column(DateTime, nullable=True)
    undone_by = Column(String, nullable=True)
    original_file_path = Column(String, nullable=True)
    original_file_encrypted = Column(Boolean, nullable=True)
    retention_until = Column(Date, nullable=True)
    imported_by = Column(String, nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
