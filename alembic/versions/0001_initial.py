from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "category_c",
        sa.Column("Id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(length=255), nullable=False, unique=True),
        sa.Column("color_c", sa.String(length=32), nullable=True),
        sa.Column("icon_c", sa.String(length=64), nullable=True),
        sa.Column("sub_category_c", sa.String(length=255), nullable=True),
        sa.Column("CreatedOn", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_table(
        "task_c",
        sa.Column("Id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("title_c", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("description_c", sa.Text(), nullable=True),
        sa.Column("category_c", sa.Integer(), sa.ForeignKey("category_c.Id", ondelete="SET NULL"), nullable=True),
        sa.Column("sub_category_c", sa.String(length=255), nullable=True),
        sa.Column("priority_c", sa.String(length=16), nullable=False, server_default="medium"),
        sa.Column("due_date_c", sa.Date(), nullable=True),
        sa.Column("completed_c", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("completed_at_c", sa.DateTime(), nullable=True),
        sa.Column("time_spent_c", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("timer_state_is_running_c", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("timer_state_last_updated_c", sa.DateTime(), nullable=True),
        sa.Column("CreatedOn", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_task_c_category_c", "task_c", ["category_c"])

    op.create_table(
        "recurring_task_pattern_c",
        sa.Column("Id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("frequency_c", sa.String(length=16), nullable=False, server_default="Daily"),
        sa.Column("interval_c", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("day_of_week_c", sa.String(length=16), nullable=True),
        sa.Column("day_of_month_c", sa.Integer(), nullable=True),
        sa.Column("week_of_month_c", sa.String(length=16), nullable=True),
        sa.Column("end_of_month_c", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("CreatedOn", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )

    op.create_table(
        "recurrence_rule_c",
        sa.Column("Id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("Name", sa.String(length=255), nullable=False, server_default=""),
        sa.Column("task_c", sa.Integer(), sa.ForeignKey("task_c.Id", ondelete="SET NULL"), nullable=True),
        sa.Column(
            "recurring_task_pattern_c",
            sa.Integer(),
            sa.ForeignKey("recurring_task_pattern_c.Id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("start_date_c", sa.Date(), nullable=False),
        sa.Column("end_date_c", sa.Date(), nullable=True),
        sa.Column("CreatedOn", sa.DateTime(), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_recurrence_rule_c_task_c", "recurrence_rule_c", ["task_c"])


def downgrade() -> None:
    op.drop_index("ix_recurrence_rule_c_task_c", table_name="recurrence_rule_c")
    op.drop_table("recurrence_rule_c")
    op.drop_table("recurring_task_pattern_c")
    op.drop_index("ix_task_c_category_c", table_name="task_c")
    op.drop_table("task_c")
    op.drop_table("category_c")
