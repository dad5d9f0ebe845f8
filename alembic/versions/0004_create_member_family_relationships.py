"""create member family relationships

Revision ID: 0004_member_family_relationships
Revises: 0003_create_members_tables
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0004_member_family_relationships"
down_revision = "0003_create_members_tables"
branch_labels = None
depends_on = None

relationship_type_enum = sa.Enum("Father", "Mother", "Spouse", "Sibling", "Child", name="family_relationship_type")


def upgrade() -> None:
    op.create_table(
        "member_family_relationships",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("member_id", sa.Integer(), sa.ForeignKey("members.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "related_member_id",
            sa.Integer(),
            sa.ForeignKey("members.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("relationship_type", relationship_type_enum, nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint(
            "member_id",
            "related_member_id",
            "relationship_type",
            name="member_family_relationships_unique_edge",
        ),
        sa.CheckConstraint("member_id <> related_member_id", name="member_family_relationships_no_self"),
    )
    op.create_index("ix_member_family_relationships_member_id", "member_family_relationships", ["member_id"])
    op.create_index(
        "ix_member_family_relationships_related_member_id",
        "member_family_relationships",
        ["related_member_id"],
    )


def downgrade() -> None:
    op.drop_index("ix_member_family_relationships_related_member_id", table_name="member_family_relationships")
    op.drop_index("ix_member_family_relationships_member_id", table_name="member_family_relationships")
    op.drop_table("member_family_relationships")
    relationship_type_enum.drop(op.get_bind(), checkfirst=True)
