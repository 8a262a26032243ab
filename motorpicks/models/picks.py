from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import relationship
from motorpicks.db.base import Base


class ClerkUser(Base):
    """Contact info mirrored from the identity provider's user.created webhook."""
    __tablename__ = "clerk_users"
    clerk_id = Column(String, primary_key=True)
    email = Column(String, nullable=False)
    full_name = Column(String, nullable=True)
    username = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class Pick(Base):
    __tablename__ = "picks"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=True)
    gp_name = Column(String, nullable=False, index=True)
    session_type = Column(String, nullable=True)   # "qualy" | "race" | "mixed"
    picks = Column(JSON, nullable=False)           # list of selections, see schemas.picks.Selection
    mode = Column(String, nullable=False)          # "Full Throttle" | "Safety Car"
    multiplier = Column(Integer, nullable=False)
    wager_amount = Column(Numeric(14, 2), nullable=False)
    potential_win = Column(Numeric(14, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    result = relationship("PickResult", back_populates="pick", uselist=False)

class OfficialResult(Base):
    __tablename__ = "official_results"
    __table_args__ = (UniqueConstraint("gp_name", "driver", name="unique_official_gp_driver"),)
    id = Column(Integer, primary_key=True, index=True)
    gp_name = Column(String, nullable=False, index=True)
    driver = Column(String, nullable=False)
    # None when the driver did not set a time / was not classified
    qualy_position = Column(Integer, nullable=True)
    race_position = Column(Integer, nullable=True)

class PickResult(Base):
    __tablename__ = "pick_results"
    __table_args__ = (
        # One grading per pick, enforced by the database so that concurrent
        # settlement runs cannot both insert.
        UniqueConstraint("pick_id", name="unique_pick_results_pick"),
        CheckConstraint("correct_count <= total_picks", name="pick_results_correct_le_total"),
        CheckConstraint("result IN ('won', 'partial', 'lost')", name="pick_results_valid_result"),
        Index("ix_pick_results_user_processed", "user_id", "processed_at"),
    )
    id = Column(Integer, primary_key=True, index=True)
    pick_id = Column(Integer, ForeignKey("picks.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, nullable=False)
    gp_name = Column(String, nullable=False)
    session_type = Column(String, nullable=True)
    picks = Column(JSON, nullable=False)
    correct_count = Column(Integer, nullable=False)
    total_picks = Column(Integer, nullable=False)
    mode = Column(String, nullable=False)
    result = Column(String, nullable=False)
    payout = Column(Numeric(14, 2), nullable=False, default=0)
    processed_at = Column(DateTime(timezone=True), nullable=False)

    pick = relationship("Pick", back_populates="result")

class Wallet(Base):
    __tablename__ = "wallets"
    __table_args__ = (
        CheckConstraint("balance_cop >= 0", name="wallets_balance_non_negative"),
        CheckConstraint("withdrawable_cop >= 0", name="wallets_withdrawable_non_negative"),
    )
    user_id = Column(String, primary_key=True)
    balance_cop = Column(Numeric(14, 2), nullable=False, default=0)
    withdrawable_cop = Column(Numeric(14, 2), nullable=False, default=0)
    mmc_coins = Column(Integer, nullable=False, default=0)
    fuel_coins = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_created", "user_id", "created_at"),)
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False)
    type = Column(String, nullable=False)          # pick_bet, promo, recarga, retiro_pending
    amount = Column(Numeric(14, 2), nullable=False)
    description = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

class PromoCode(Base):
    __tablename__ = "promo_codes"
    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, nullable=False, unique=True)
    fuel_amount = Column(Integer, nullable=False, default=0)
    mmc_amount = Column(Integer, nullable=False, default=0)
    max_uses = Column(Integer, nullable=False, default=1)
    expires_at = Column(DateTime(timezone=True), nullable=True)

class PromoCodeRedemption(Base):
    __tablename__ = "promo_code_redemptions"
    __table_args__ = (UniqueConstraint("code_id", "user_id", name="unique_redemption_code_user"),)
    id = Column(Integer, primary_key=True, index=True)
    code_id = Column(Integer, ForeignKey("promo_codes.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    code = relationship("PromoCode")

class WithdrawalRequest(Base):
    __tablename__ = "withdrawal_requests"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    amount = Column(Numeric(14, 2), nullable=False)
    method = Column(String, nullable=False)
    account = Column(String, nullable=False)
    status = Column(String, nullable=False, default="pending")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
