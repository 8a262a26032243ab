"""picks, wallet and settlement tables

Revision ID: 3b7e91c04a2d
Revises:
Create Date: 2025-06-02 19:42:11.204518

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3b7e91c04a2d'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clerk_users",
        sa.Column("clerk_id", sa.String(), primary_key=True),
        sa.Column("email", sa.String(), nullable=False),
        sa.Column("full_name", sa.String(), nullable=True),
        sa.Column("username", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "picks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("name", sa.String(), nullable=True),
        sa.Column("gp_name", sa.String(), nullable=False),
        sa.Column("session_type", sa.String(), nullable=True),
        sa.Column("picks", sa.JSON(), nullable=False),
        sa.Column("mode", sa.String(), nullable=False),
        sa.Column("multiplier", sa.Integer(), nullable=False),
        sa.Column("wager_amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("potential_win", sa.Numeric(14, 2), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_picks_id", "picks", ["id"])
    op.create_index("ix_picks_user_id", "picks", ["user_id"])
    op.create_index("ix_picks_gp_name", "picks", ["gp_name"])

    op.create_table(
        "official_results",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("gp_name", sa.String(), nullable=False),
        sa.Column("driver", sa.String(), nullable=False),
        sa.Column("qualy_position", sa.Integer(), nullable=True),
        sa.Column("race_position", sa.Integer(), nullable=True),
        sa.UniqueConstraint("gp_name", "driver", name="unique_official_gp_driver"),
    )
    op.create_index("ix_official_results_id", "official_results", ["id"])
    op.create_index("ix_official_results_gp_name", "official_results", ["gp_name"])

    op.create_table(
        "pick_results",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("pick_id", sa.Integer(), sa.ForeignKey("picks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("gp_name", sa.String(), nullable=False),
        sa.Column("session_type", sa.String(), nullable=True),
        sa.Column("picks", sa.JSON(), nullable=False),
        sa.Column("correct_count", sa.Integer(), nullable=False),
        sa.Column("total_picks", sa.Integer(), nullable=False),
        sa.Column("mode", sa.String(), nullable=False),
        sa.Column("result", sa.String(), nullable=False),
        sa.Column("payout", sa.Numeric(14, 2), nullable=False),
        sa.Column("processed_at", sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint("pick_id", name="unique_pick_results_pick"),
        sa.CheckConstraint("correct_count <= total_picks", name="pick_results_correct_le_total"),
        sa.CheckConstraint("result IN ('won', 'partial', 'lost')", name="pick_results_valid_result"),
    )
    op.create_index("ix_pick_results_id", "pick_results", ["id"])
    op.create_index("ix_pick_results_user_processed", "pick_results", ["user_id", "processed_at"])

    op.create_table(
        "wallets",
        sa.Column("user_id", sa.String(), primary_key=True),
        sa.Column("balance_cop", sa.Numeric(14, 2), nullable=False),
        sa.Column("withdrawable_cop", sa.Numeric(14, 2), nullable=False),
        sa.Column("mmc_coins", sa.Integer(), nullable=False),
        sa.Column("fuel_coins", sa.Integer(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("balance_cop >= 0", name="wallets_balance_non_negative"),
        sa.CheckConstraint("withdrawable_cop >= 0", name="wallets_withdrawable_non_negative"),
    )
    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("type", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("description", sa.String(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_transactions_id", "transactions", ["id"])
    op.create_index("ix_transactions_user_created", "transactions", ["user_id", "created_at"])

    op.create_table(
        "promo_codes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code", sa.String(), nullable=False, unique=True),
        sa.Column("fuel_amount", sa.Integer(), nullable=False),
        sa.Column("mmc_amount", sa.Integer(), nullable=False),
        sa.Column("max_uses", sa.Integer(), nullable=False),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_promo_codes_id", "promo_codes", ["id"])
    op.create_table(
        "promo_code_redemptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("code_id", sa.Integer(), sa.ForeignKey("promo_codes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("code_id", "user_id", name="unique_redemption_code_user"),
    )
    op.create_index("ix_promo_code_redemptions_id", "promo_code_redemptions", ["id"])

    op.create_table(
        "withdrawal_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column("method", sa.String(), nullable=False),
        sa.Column("account", sa.String(), nullable=False),
        sa.Column("status", sa.String(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_withdrawal_requests_id", "withdrawal_requests", ["id"])
    op.create_index("ix_withdrawal_requests_user_id", "withdrawal_requests", ["user_id"])

def downgrade() -> None:
    op.drop_table("withdrawal_requests")
    op.drop_table("promo_code_redemptions")
    op.drop_table("promo_codes")
    op.drop_table("transactions")
    op.drop_table("wallets")
    op.drop_table("pick_results")
    op.drop_table("official_results")
    op.drop_table("picks")
    op.drop_table("clerk_users")
