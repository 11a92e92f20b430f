"""Initial migration - field notes and photos

Revision ID: 001_initial
Revises:
Create Date: 2026-10-17

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create field_notes table
    op.create_table(
        'field_notes',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('title', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('trip_type', sa.String(32), nullable=False),
        sa.Column('date', sa.DateTime(), nullable=False),
        sa.Column('distance', sa.Float(), nullable=True),
        sa.Column('elevation_gain', sa.Float(), nullable=True),
        sa.Column('gpx_data', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_field_notes_trip_type', 'field_notes', ['trip_type'])
    op.create_index('ix_field_notes_date', 'field_notes', ['date'])

    # Create photos table
    op.create_table(
        'photos',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column(
            'field_note_id',
            sa.String(36),
            sa.ForeignKey('field_notes.id', ondelete='CASCADE'),
            nullable=False,
        ),
        sa.Column('filename', sa.Text(), nullable=False),
        sa.Column('url', sa.Text(), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('elevation', sa.Float(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=True),
        sa.Column('camera', sa.Text(), nullable=True),
        sa.Column('lens', sa.Text(), nullable=True),
        sa.Column('aperture', sa.String(32), nullable=True),
        sa.Column('shutter_speed', sa.String(32), nullable=True),
        sa.Column('iso', sa.Integer(), nullable=True),
        sa.Column('focal_length', sa.String(32), nullable=True),
        sa.Column('file_size', sa.String(32), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
    )
    op.create_index('ix_photos_field_note_id', 'photos', ['field_note_id'])


def downgrade() -> None:
    op.drop_index('ix_photos_field_note_id', table_name='photos')
    op.drop_table('photos')
    op.drop_index('ix_field_notes_date', table_name='field_notes')
    op.drop_index('ix_field_notes_trip_type', table_name='field_notes')
    op.drop_table('field_notes')
