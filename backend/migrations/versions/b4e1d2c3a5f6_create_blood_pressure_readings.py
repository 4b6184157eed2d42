"""create blood pressure readings table

Revision ID: b4e1d2c3a5f6
Revises:
Create Date: 2025-10-29 09:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'b4e1d2c3a5f6'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('blood_pressure_readings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('client_ref', sa.BigInteger(), nullable=True),
        sa.Column('systolic', sa.Integer(), nullable=False),
        sa.Column('diastolic', sa.Integer(), nullable=False),
        sa.Column('pulse', sa.Integer(), nullable=False),
        sa.Column('reading_date', sa.Date(), nullable=False),
        sa.Column('reading_time', sa.Time(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('client_ref')
    )
    op.create_index('ix_blood_pressure_readings_taken_at', 'blood_pressure_readings',
                    ['reading_date', 'reading_time'])


def downgrade():
    op.drop_index('ix_blood_pressure_readings_taken_at', table_name='blood_pressure_readings')
    op.drop_table('blood_pressure_readings')
