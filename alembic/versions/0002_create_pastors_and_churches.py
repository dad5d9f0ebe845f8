"""create pastors and churches tables

Revision ID: 0002_create_pastors_and_churches
Revises: 0001_create_users_and_roles
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "0002_create_pastors_and_churches"
down_revision = "0001_create_users_and_roles"
branch_labels = None
depends_on = None

presbytery_enum = sa.Enum("PANA", "PNAN", name="presbytery_type")
office_role_enum = sa.Enum("Pastor", name="office_role")
existing_presbytery_enum = postgresql.ENUM("PANA", "PNAN", name="presbytery_type", create_type=False)
church_type_enum = sa.Enum(
    "Church",
    "Congregation",
    "Presbyterial Congregation",
    "Preaching Point",
    name="church_type",
)


def upgrade() -> None:
    op.create_table(
        "pastors",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("photo_url", sa.String(length=255), nullable=True),
        sa.Column("office", office_role_enum, nullable=False, server_default="Pastor"),
        sa.Column("name", sa.String(length=150), nullable=False),
        sa.Column("wife", sa.String(length=150), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("address_line_2", sa.String(length=255), nullable=True),
        sa.Column("neighborhood", sa.String(length=120), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("state", sa.String(length=2), nullable=False),
        sa.Column("country", sa.String(length=120), nullable=False, server_default="Brazil"),
        sa.Column("postal_code", sa.String(length=9), nullable=False),
        sa.Column("phone", sa.String(length=25), nullable=False),
        sa.Column("mobile", sa.String(length=25), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("cpf", sa.String(length=14), nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=False),
        sa.Column("ordination_date", sa.Date(), nullable=False),
        sa.Column("presbytery", presbytery_enum, nullable=False, server_default="PANA"),
        sa.Column("retired", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("retirement_date", sa.Date(), nullable=True),
        sa.Column("released_from_office", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("released_date", sa.Date(), nullable=True),
        sa.Column("deceased", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("deceased_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint(
            "(retired = false AND retirement_date IS NULL) OR (retired = true AND retirement_date IS NOT NULL)",
            name="pastors_retirement_date_check",
        ),
        sa.CheckConstraint(
            "(released_from_office = false AND released_date IS NULL) "
            "OR (released_from_office = true AND released_date IS NOT NULL)",
            name="pastors_released_date_check",
        ),
        sa.CheckConstraint(
            "(deceased = false AND deceased_date IS NULL) OR (deceased = true AND deceased_date IS NOT NULL)",
            name="pastors_deceased_date_check",
        ),
    )
    op.create_index("ix_pastors_name", "pastors", ["name"])
    op.create_index("ix_pastors_city", "pastors", ["city"])
    op.create_index("ix_pastors_state", "pastors", ["state"])
    op.create_index("ix_pastors_presbytery", "pastors", ["presbytery"])
    op.create_index("ix_pastors_email", "pastors", ["email"], unique=True)
    op.create_index("ix_pastors_cpf", "pastors", ["cpf"], unique=True)

    op.create_table(
        "churches",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("photo_url", sa.String(length=255), nullable=True),
        sa.Column("type", church_type_enum, nullable=False, server_default="Church"),
        sa.Column(
            "parent_church_id",
            sa.Integer(),
            sa.ForeignKey("churches.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("address", sa.String(length=255), nullable=False),
        sa.Column("neighborhood", sa.String(length=120), nullable=False),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("state", sa.String(length=2), nullable=False),
        sa.Column("country", sa.String(length=120), nullable=False, server_default="Brazil"),
        sa.Column("postal_code", sa.String(length=9), nullable=False),
        sa.Column("phone", sa.String(length=25), nullable=False),
        sa.Column("website", sa.String(length=255), nullable=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("cnpj", sa.String(length=18), nullable=False, unique=True),
        sa.Column("lead_pastor_id", sa.Integer(), sa.ForeignKey("pastors.id", ondelete="SET NULL"), nullable=True),
        sa.Column("organization_date", sa.Date(), nullable=False),
        sa.Column("presbytery", existing_presbytery_enum, nullable=False, server_default="PANA"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("id <> parent_church_id", name="churches_not_self_parent"),
        sa.CheckConstraint(
            "NOT (type = 'Church' AND parent_church_id IS NOT NULL)",
            name="churches_independent_has_no_parent",
        ),
    )
    op.create_index("ix_churches_type", "churches", ["type"])
    op.create_index("ix_churches_parent_church_id", "churches", ["parent_church_id"])
    op.create_index("ix_churches_name", "churches", ["name"])
    op.create_index("ix_churches_presbytery", "churches", ["presbytery"])

    op.create_table(
        "church_assistant_pastors",
        sa.Column("church_id", sa.Integer(), sa.ForeignKey("churches.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("pastor_id", sa.Integer(), sa.ForeignKey("pastors.id", ondelete="CASCADE"), primary_key=True),
    )


def downgrade() -> None:
    op.drop_table("church_assistant_pastors")
    op.drop_index("ix_churches_presbytery", table_name="churches")
    op.drop_index("ix_churches_name", table_name="churches")
    op.drop_index("ix_churches_parent_church_id", table_name="churches")
    op.drop_index("ix_churches_type", table_name="churches")
    op.drop_table("churches")
    op.drop_index("ix_pastors_cpf", table_name="pastors")
    op.drop_index("ix_pastors_email", table_name="pastors")
    op.drop_index("ix_pastors_presbytery", table_name="pastors")
    op.drop_index("ix_pastors_state", table_name="pastors")
    op.drop_index("ix_pastors_city", table_name="pastors")
    op.drop_index("ix_pastors_name", table_name="pastors")
    op.drop_table("pastors")
    church_type_enum.drop(op.get_bind(), checkfirst=True)
    office_role_enum.drop(op.get_bind(), checkfirst=True)
    presbytery_enum.drop(op.get_bind(), checkfirst=True)
