"""sensor_data table

Revision ID: 0001_sensor_data
Revises:
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001_sensor_data'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table('sensor_data',
        sa.Column('id', sa.String(length=64), nullable=False),
        sa.Column('device_id', sa.String(length=255), nullable=False, server_default=''),
        sa.Column('is_backedup', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('temperature', sa.Float(), nullable=False, server_default='0'),
        sa.Column('humidity', sa.Float(), nullable=False, server_default='0'),
        sa.Column('ethylene_level', sa.Float(), nullable=False, server_default='0'),
        sa.Column('uploaded_by', sa.String(length=500), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_sensor_data_device_id'), 'sensor_data', ['device_id'], unique=False)
    op.create_index(op.f('ix_sensor_data_created_at'), 'sensor_data', ['created_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_sensor_data_created_at'), table_name='sensor_data')
    op.drop_index(op.f('ix_sensor_data_device_id'), table_name='sensor_data')
    op.drop_table('sensor_data')
