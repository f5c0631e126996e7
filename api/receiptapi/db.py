import os, uuid
from sqlalchemy import create_engine, Column, String, JSON, TIMESTAMP, Integer, Date, Numeric, text
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.sql import func

from .quota import QuotaCounters


DB_URL = os.getenv("DATABASE_URL") or os.getenv("DB_URL", "sqlite:///./receipts.db")

# SQLite has no schemas; only PostgreSQL gets one
RECEIPTS_SCHEMA = os.getenv("RECEIPTS_SCHEMA", "receipts")
USE_SCHEMA = DB_URL.startswith("postgresql") or DB_URL.startswith("postgres")
TABLE_SCHEMA = RECEIPTS_SCHEMA if USE_SCHEMA else None

engine = create_engine(DB_URL, future=True)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)
Base = declarative_base()


class User(Base):
    __tablename__ = "users"
    __table_args__ = {'schema': TABLE_SCHEMA} if TABLE_SCHEMA else {}
    id = Column(String, primary_key=True)
    week_counts = Column(JSON, nullable=False, default=dict)    # {"1": 3, "2": 1}
    month_counts = Column(JSON, nullable=False, default=dict)   # {"2024-11": 4}
    total_count = Column(Integer, nullable=False, default=0)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now())

    def counters(self) -> QuotaCounters:
        return QuotaCounters(
            week_counts=dict(self.week_counts or {}),
            month_counts=dict(self.month_counts or {}),
            total_count=self.total_count or 0,
        )

    def store_counters(self, counters: QuotaCounters) -> None:
        # reassign so the JSON columns are marked dirty
        self.week_counts = dict(counters.week_counts)
        self.month_counts = dict(counters.month_counts)
        self.total_count = counters.total_count


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = {'schema': TABLE_SCHEMA} if TABLE_SCHEMA else {}
    id = Column(String, primary_key=True, default=lambda: "txn_" + uuid.uuid4().hex[:12])
    user_id = Column(String, nullable=False, index=True)
    reference_id = Column(String, nullable=False, unique=True)
    date = Column(Date, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    transaction_type = Column(String, nullable=True)
    image_url = Column(String, nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())


def init_db():
    """Create the schema (PostgreSQL only) and tables."""
    if USE_SCHEMA:
        try:
            with engine.connect() as conn:
                conn.execute(text(f"CREATE SCHEMA IF NOT EXISTS {RECEIPTS_SCHEMA}"))
                conn.commit()
        except Exception as e:
            import logging
            logging.warning(f"Could not create schema {RECEIPTS_SCHEMA}: {e}")

    Base.metadata.create_all(bind=engine)


def get_or_create_user(db, user_id: str) -> User:
    user = db.get(User, user_id)
    if user is None:
        user = User(id=user_id, week_counts={}, month_counts={}, total_count=0)
        db.add(user)
        db.flush()
    return user


def reference_exists(db, reference_id: str) -> bool:
    return db.query(Transaction.id).filter(Transaction.reference_id == reference_id).first() is not None


def create_transaction(db, *, user_id: str, reference_id: str, date, amount,
                       transaction_type: str | None, image_url: str) -> Transaction:
    txn = Transaction(
        user_id=user_id,
        reference_id=reference_id,
        date=date,
        amount=amount,
        transaction_type=transaction_type,
        image_url=image_url,
    )
    db.add(txn)
    db.flush()
    return txn


def list_transactions(db, user_id: str, *, page: int = 1, per_page: int = 10):
    query = db.query(Transaction).filter(Transaction.user_id == user_id)
    total = query.count()
    items = (
        query
        .order_by(Transaction.created_at.desc(), Transaction.id.desc())
        .offset((page - 1) * per_page)
        .limit(per_page)
        .all()
    )
    return items, total
