"""
Database Utility
----------------
Manages the SQLAlchemy engine (Postgres or SQLite), the ledger tables and the
explicit init step that creates the single contract-counters row.
"""

from sqlalchemy import (
    BigInteger,
    Boolean,
    Column,
    ForeignKey,
    Integer,
    LargeBinary,
    String,
    create_engine,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from typing import Iterator, Optional

from underwriting.config import config
from underwriting.engine.constants import (
    CATEGORY_MAX_BYTES,
    DEFAULT_REPUTATION_SCORE,
    DESCRIPTION_MAX_LENGTH,
    EVIDENCE_DIGEST_SIZE,
)
from underwriting.utils.logger import logger

Base = declarative_base()

COUNTERS_ROW_ID = 1


# =========================================================
# 🧱 Tables
# =========================================================
class PolicyRecord(Base):
    __tablename__ = "policies"

    policy_id = Column(Integer, primary_key=True, autoincrement=False)
    holder = Column(String(255), nullable=False, index=True)
    coverage_amount = Column(BigInteger, nullable=False)
    premium_amount = Column(BigInteger, nullable=False)
    risk_score = Column(Integer, nullable=False)
    policy_category = Column(String(CATEGORY_MAX_BYTES), nullable=False)
    start_block = Column(BigInteger, nullable=False)
    end_block = Column(BigInteger, nullable=False)
    active = Column(Boolean, nullable=False, default=True)
    claims_count = Column(Integer, nullable=False, default=0)


class ClaimRecord(Base):
    __tablename__ = "claims"

    claim_id = Column(Integer, primary_key=True, autoincrement=False)
    policy_id = Column(Integer, ForeignKey("policies.policy_id"), nullable=False, index=True)
    claimant = Column(String(255), nullable=False, index=True)
    amount = Column(BigInteger, nullable=False)
    description = Column(String(DESCRIPTION_MAX_LENGTH), nullable=False, default="")
    submitted_block = Column(BigInteger, nullable=False)
    processed = Column(Boolean, nullable=False, default=False)
    approved = Column(Boolean, nullable=False, default=False)
    fraud_score = Column(Integer, nullable=False)
    evidence_digest = Column(LargeBinary(EVIDENCE_DIGEST_SIZE), nullable=False)


class UserProfileRecord(Base):
    __tablename__ = "user_profiles"

    identity = Column(String(255), primary_key=True)
    total_policies = Column(Integer, nullable=False, default=0)
    claims_history = Column(Integer, nullable=False, default=0)
    reputation_score = Column(Integer, nullable=False, default=DEFAULT_REPUTATION_SCORE)
    last_claim_block = Column(BigInteger, nullable=False, default=0)
    blacklisted = Column(Boolean, nullable=False, default=False)


class ContractCountersRecord(Base):
    __tablename__ = "contract_counters"

    id = Column(Integer, primary_key=True)
    policy_nonce = Column(Integer, nullable=False, default=0)
    claim_nonce = Column(Integer, nullable=False, default=0)
    contract_balance = Column(BigInteger, nullable=False, default=0)
    paused = Column(Boolean, nullable=False, default=False)


# =========================================================
# ⚙️ Engine Setup
# =========================================================
def create_ledger_engine(url: Optional[str] = None) -> Engine:
    """Build an engine; in-memory SQLite shares one connection so tables survive."""
    url = url or config.DB_URL
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=config.DEBUG, **kwargs)
    return create_engine(
        url,
        echo=config.DEBUG,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
        connect_args={"connect_timeout": 10},
    )


engine = create_ledger_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """FastAPI dependency for DB session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# =========================================================
# 🧱 Table Initialization
# =========================================================
def init_db(bind: Optional[Engine] = None) -> None:
    """
    Create the ledger tables and the contract-counters row.
    Idempotent: existing tables and counters are left untouched.
    """
    bind = bind or engine
    try:
        Base.metadata.create_all(bind=bind)
        with Session(bind=bind) as session:
            if session.get(ContractCountersRecord, COUNTERS_ROW_ID) is None:
                session.add(ContractCountersRecord(id=COUNTERS_ROW_ID))
                session.commit()
                logger.info("✅ Contract counters initialized.")
        logger.info(f"✅ Ledger tables ready: {bind.url.render_as_string(hide_password=True)}")
    except Exception as e:
        logger.error(f"❌ DB init error: {e}")
        raise
