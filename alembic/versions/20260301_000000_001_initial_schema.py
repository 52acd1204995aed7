"""Initial schema: users, preferences, saved recipes, grocery lists, inventory,
scheduled emails.

Revision ID: 001
Revises:
Create Date: 2026-03-01 00:00:00.000000
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade():
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=True),
        sa.Column("password_hash", sa.String(length=255), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("email"),
    )

    op.create_table(
        "auth_tokens",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("token", sa.String(length=128), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("token"),
    )

    # One row per user, created lazily on first save
    flag_columns = [
        sa.Column(name, sa.Boolean(), nullable=False, server_default="false")
        for name in (
            "is_vegan", "is_vegetarian", "is_pescatarian", "is_keto", "is_paleo",
            "is_gluten_free", "is_dairy_free", "is_nut_free", "is_halal",
            "is_kosher", "is_low_carb", "is_low_fat",
        )
    ]
    op.create_table(
        "user_preferences",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        *flag_columns,
        sa.Column("allergies", sa.Text(), nullable=True),
        sa.Column("preferred_cuisines", sa.Text(), nullable=True),
        sa.Column("disliked_ingredients", sa.Text(), nullable=True),
        sa.Column("calorie_target", sa.Integer(), nullable=True),
        sa.Column("protein_target", sa.Integer(), nullable=True),
        sa.Column("carb_target", sa.Integer(), nullable=True),
        sa.Column("fat_target", sa.Integer(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "saved_recipes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("recipe_id", sa.Integer(), nullable=False),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("image", sa.String(length=1000), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "recipe_id", name="uq_saved_recipes_user_recipe"),
    )

    op.create_table(
        "grocery_lists",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("items", sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id"),
    )

    op.create_table(
        "inventory_items",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("quantity", sa.Float(), nullable=True),
        sa.Column("unit", sa.String(length=50), nullable=True),
        sa.Column("category", sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "scheduled_emails",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column(
            "email_type",
            sa.Enum("GROCERY_LIST", name="emailtype"),
            nullable=False,
        ),
        sa.Column("scheduled_for", sa.DateTime(), nullable=False),
        sa.Column(
            "status",
            sa.Enum("PENDING", "SENT", "FAILED", name="scheduledemailstatus"),
            nullable=False,
        ),
        sa.Column("data", sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["user_id"], ["users.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    # The cron sweep scans by status and due time
    op.create_index(
        "ix_scheduled_emails_status_scheduled_for",
        "scheduled_emails",
        ["status", "scheduled_for"],
    )


def downgrade():
    op.drop_index("ix_scheduled_emails_status_scheduled_for", table_name="scheduled_emails")
    op.drop_table("scheduled_emails")
    op.drop_table("inventory_items")
    op.drop_table("grocery_lists")
    op.drop_table("saved_recipes")
    op.drop_table("user_preferences")
    op.drop_table("auth_tokens")
    op.drop_table("users")

    op.execute("DROP TYPE IF EXISTS scheduledemailstatus")
    op.execute("DROP TYPE IF EXISTS emailtype")
