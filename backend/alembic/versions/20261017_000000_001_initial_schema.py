"""Initial database schema for Patient Registry

Revision ID: 001
Revises:
Create Date: 2026-10-17 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create patients table
    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(128), nullable=False),
        sa.Column("last_name", sa.String(128), nullable=False),
        sa.Column("middle_name", sa.String(128), nullable=True),
        sa.Column("date_of_birth", sa.DateTime(timezone=True), nullable=False),
        sa.Column("address", sa.Text(), nullable=False),
        sa.Column(
            "status",
            sa.String(16),
            server_default="inquiry",
            nullable=False,
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "status IN ('inquiry', 'onboarding', 'active', 'churned')",
            name=op.f("ck_patients_patient_status"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_patients")),
    )
    op.create_index("ix_patients_created_at", "patients", ["created_at"], unique=False)
    op.create_index("ix_patients_status", "patients", ["status"], unique=False)
    op.create_index("ix_patients_last_name", "patients", ["last_name"], unique=False)

    # Create patient_addresses table
    op.create_table(
        "patient_addresses",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=False),
        sa.Column("address_line1", sa.String(256), nullable=False),
        sa.Column("address_line2", sa.String(256), nullable=True),
        sa.Column("city", sa.String(128), nullable=False),
        sa.Column("state", sa.String(64), nullable=False),
        sa.Column("zip_code", sa.String(32), nullable=False),
        sa.Column("country", sa.String(64), server_default="USA", nullable=False),
        sa.Column(
            "address_type",
            sa.String(16),
            server_default="home",
            nullable=False,
        ),
        sa.Column("is_primary", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.CheckConstraint(
            "address_type IN ('home', 'work', 'billing', 'other')",
            name=op.f("ck_patient_addresses_address_type"),
        ),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.id"],
            name=op.f("fk_patient_addresses_patient_id_patients"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_patient_addresses")),
    )
    op.create_index(
        "ix_patient_addresses_patient_id", "patient_addresses", ["patient_id"], unique=False
    )
    op.create_index(
        "ix_patient_addresses_patient_primary",
        "patient_addresses",
        ["patient_id", "is_primary"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_patient_addresses_patient_primary", table_name="patient_addresses")
    op.drop_index("ix_patient_addresses_patient_id", table_name="patient_addresses")
    op.drop_table("patient_addresses")

    op.drop_index("ix_patients_last_name", table_name="patients")
    op.drop_index("ix_patients_status", table_name="patients")
    op.drop_index("ix_patients_created_at", table_name="patients")
    op.drop_table("patients")
