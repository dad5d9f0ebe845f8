"""create members and member audit tables

Revision ID: 0003_create_members_tables
Revises: 0002_create_pastors_and_churches
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0003_create_members_tables"
down_revision = "0002_create_pastors_and_churches"
branch_labels = None
depends_on = None

member_sex_enum = sa.Enum("Male", "Female", name="member_sex")
marital_status_enum = sa.Enum(
    "Single",
    "Married",
    "Separated",
    "Divorced",
    "Widowed",
    "Common-law union",
    name="marital_status_type",
)
education_level_enum = sa.Enum(
    "Primary school",
    "High school",
    "Vocational/Technical",
    "College/University",
    "Master's",
    "Doctorate",
    "Post-doc",
    "Illiterate",
    "Literate",
    "Not informed",
    name="education_level_type",
)
member_status_enum = sa.Enum("Communicant", "Non-communicant", "Not a member", name="member_status_type")
member_office_enum = sa.Enum("Not an officer", "Deacon", "Elder", "Elder on availability", name="member_office_type")
member_situation_enum = sa.Enum("Active", "Inactive", "Attends", name="member_situation_type")
admission_method_enum = sa.Enum(
    "Baptism",
    "Profession of faith",
    "Baptism and Profession of faith",
    "Transfer",
    "Transfer of guardians",
    "Restoration",
    "Ex-officio jurisdiction",
    "Jurisdiction on request",
    "Jurisdiction over guardians",
    "Presbytery designation",
    name="admission_method_type",
)
dismissal_method_enum = sa.Enum(
    "Disciplinary exclusion",
    "Exclusion on request",
    "Exclusion due to absence",
    "Transfer",
    "Transfer of guardians",
    "Transfer by session/council",
    "Jurisdiction assumed",
    "Jurisdiction over guardians",
    "Profession of faith",
    "Deceased",
    "Majority/coming of age",
    "Guardians' request",
    name="dismissal_method_type",
)

_ENUMS = (
    member_sex_enum,
    marital_status_enum,
    education_level_enum,
    member_status_enum,
    member_office_enum,
    member_situation_enum,
    admission_method_enum,
    dismissal_method_enum,
)


def upgrade() -> None:
    op.create_table(
        "members",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("photo_url", sa.String(length=255), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("sex", member_sex_enum, nullable=False),
        sa.Column("date_of_birth", sa.Date(), nullable=True),
        sa.Column("place_of_birth", sa.String(length=150), nullable=True),
        sa.Column("cpf", sa.String(length=14), nullable=True, unique=True),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=25), nullable=True),
        sa.Column("mobile", sa.String(length=25), nullable=True),
        sa.Column("address", sa.String(length=255), nullable=True),
        sa.Column("address_line_2", sa.String(length=255), nullable=True),
        sa.Column("neighborhood", sa.String(length=120), nullable=True),
        sa.Column("city", sa.String(length=120), nullable=True),
        sa.Column("state", sa.String(length=2), nullable=True),
        sa.Column("country", sa.String(length=120), nullable=True, server_default="Brazil"),
        sa.Column("postal_code", sa.String(length=9), nullable=True),
        sa.Column("marital_status", marital_status_enum, nullable=False, server_default="Single"),
        sa.Column("spouse", sa.String(length=200), nullable=True),
        sa.Column("wedding_date", sa.Date(), nullable=True),
        sa.Column("cpf_rg", sa.String(length=30), nullable=True),
        sa.Column("issuing_authority", sa.String(length=60), nullable=True),
        sa.Column("education_level", education_level_enum, nullable=True),
        sa.Column("profession", sa.String(length=120), nullable=True),
        sa.Column("mother_name", sa.String(length=200), nullable=True),
        sa.Column("father_name", sa.String(length=200), nullable=True),
        sa.Column("church_id", sa.Integer(), sa.ForeignKey("churches.id", ondelete="RESTRICT"), nullable=False),
        sa.Column("membership_number", sa.String(length=8), nullable=True),
        sa.Column("member_status", member_status_enum, nullable=False, server_default="Communicant"),
        sa.Column("office", member_office_enum, nullable=False, server_default="Not an officer"),
        sa.Column("situation", member_situation_enum, nullable=False, server_default="Active"),
        sa.Column("admission_date", sa.Date(), nullable=False),
        sa.Column("admission_method", admission_method_enum, nullable=False),
        sa.Column("baptism_date", sa.Date(), nullable=True),
        sa.Column("baptism_pastor", sa.String(length=200), nullable=True),
        sa.Column("baptism_church", sa.String(length=200), nullable=True),
        sa.Column("profession_of_faith_date", sa.Date(), nullable=True),
        sa.Column("profession_of_faith_pastor", sa.String(length=200), nullable=True),
        sa.Column("profession_of_faith_church", sa.String(length=200), nullable=True),
        sa.Column("dismissal_date", sa.Date(), nullable=True),
        sa.Column("dismissal_method", dismissal_method_enum, nullable=True),
        sa.Column("disciplined", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("discipline_date", sa.Date(), nullable=True),
        sa.Column("discipline_notes", sa.Text(), nullable=True),
        sa.Column("pending_transfer", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("history", sa.Text(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("updated_by_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.UniqueConstraint("church_id", "membership_number", name="members_church_membership_number_unique"),
        sa.CheckConstraint(
            "(disciplined = false AND discipline_date IS NULL) OR (disciplined = true AND discipline_date IS NOT NULL)",
            name="members_discipline_date_check",
        ),
    )
    op.create_index("ix_members_name", "members", ["name"])
    op.create_index("ix_members_church_id", "members", ["church_id"])
    op.create_index("ix_members_membership_number", "members", ["membership_number"])
    op.create_index("ix_members_situation", "members", ["situation"])

    op.create_table(
        "member_audit",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("member_id", sa.Integer(), sa.ForeignKey("members.id", ondelete="CASCADE"), nullable=False),
        sa.Column("field", sa.String(length=100), nullable=False),
        sa.Column("old_value", sa.Text(), nullable=True),
        sa.Column("new_value", sa.Text(), nullable=True),
        sa.Column("changed_by_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("changed_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_member_audit_member_id", "member_audit", ["member_id"])
    op.create_index("ix_member_audit_changed_at", "member_audit", ["changed_at"])


def downgrade() -> None:
    op.drop_index("ix_member_audit_changed_at", table_name="member_audit")
    op.drop_index("ix_member_audit_member_id", table_name="member_audit")
    op.drop_table("member_audit")
    op.drop_index("ix_members_situation", table_name="members")
    op.drop_index("ix_members_membership_number", table_name="members")
    op.drop_index("ix_members_church_id", table_name="members")
    op.drop_index("ix_members_name", table_name="members")
    op.drop_table("members")
    for enum in _ENUMS:
        enum.drop(op.get_bind(), checkfirst=True)
