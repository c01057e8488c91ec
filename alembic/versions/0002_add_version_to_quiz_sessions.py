"""add version to quiz_sessions

Revision ID: 0002_session_version
Revises: 0001_quiz
Create Date: 2026-10-20 09:03:17.402551

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0002_session_version"
down_revision: Union[str, Sequence[str], None] = "0001_quiz"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    with op.batch_alter_table("quiz_sessions") as batch:
        batch.add_column(
            sa.Column("version", sa.Integer(), nullable=False, server_default="1")
        )


def downgrade() -> None:
    with op.batch_alter_table("quiz_sessions") as batch:
        batch.drop_column("version")
