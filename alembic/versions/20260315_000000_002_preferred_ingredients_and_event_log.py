"""Add preferred ingredients, free-text diets and the event log.

Revision ID: 002
Revises: 001
Create Date: 2026-03-15 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers
revision = "002"
down_revision = "001"
branch_labels = None
depends_on = None


def upgrade():
    # Comma-joined, like allergies
    op.add_column(
        "user_preferences",
        sa.Column("preferred_ingredients", sa.Text(), nullable=True),
    )
    # Diet labels outside the boolean flag set (e.g. "low fodmap")
    op.add_column(
        "user_preferences",
        sa.Column("additional_diets", sa.Text(), nullable=True),
    )

    # Event log for audit trail; user_id is not a foreign key
    op.create_table(
        "event_log",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("timestamp", sa.DateTime(), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=True),
        sa.Column(
            "action_type",
            sa.Enum(
                "register", "change_password", "delete_account",
                "update_preferences", "save_recipe", "unsave_recipe",
                "add_to_grocery_list", "update_grocery_list", "clear_grocery_list",
                "send_grocery_list", "schedule_email", "cancel_scheduled_email",
                "process_inventory", "remove_inventory_item",
                name="actiontype",
            ),
            nullable=False,
        ),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("related_ids", sa.JSON(), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade():
    op.drop_table("event_log")
    op.execute("DROP TYPE IF EXISTS actiontype")
    op.drop_column("user_preferences", "additional_diets")
    op.drop_column("user_preferences", "preferred_ingredients")
