"""PostgreSQL: forbid overlapping confirmed bookings per room

Revision ID: 8f4b2d6e1a93
Revises: 3c1e9a7d2b40
Create Date: 2026-10-19 10:30:00

Notes:
- Closed ranges ('[]'): a booking ending exactly when another starts still conflicts,
  matching the availability search.
- Needs btree_gist for the equality part on room_id.
- No-op on other dialects; there the confirmation endpoint's row lock and overlap check apply.
"""
from typing import Sequence, Union

from alembic import op


revision: str = "8f4b2d6e1a93"
down_revision: Union[str, None] = "3c1e9a7d2b40"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

CONSTRAINT = "ex_bookings_confirmed_room_overlap"


def _is_postgres() -> bool:
    return op.get_bind().dialect.name == "postgresql"


def upgrade() -> None:
    if not _is_postgres():
        return
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        f"""
        ALTER TABLE bookings ADD CONSTRAINT {CONSTRAINT}
        EXCLUDE USING gist (
            room_id WITH =,
            tsrange(check_in_date, check_out_date, '[]') WITH &&
        )
        WHERE (status = 'confirmed')
        """
    )


def downgrade() -> None:
    if not _is_postgres():
        return
    op.execute(f"ALTER TABLE bookings DROP CONSTRAINT IF EXISTS {CONSTRAINT}")
