"""ux audit results

Revision ID: 001_ux_audit_results
Revises: 
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

revision = '001_ux_audit_results'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    json_type = sa.JSON().with_variant(postgresql.JSONB(), "postgresql")

    op.create_table(
        'ux_audit_results',
        sa.Column('audit_id', sa.String(64), primary_key=True),
        sa.Column('url', sa.String(2048), nullable=False),
        sa.Column('page_type', sa.String(32), nullable=False),
        sa.Column('score', sa.Integer, nullable=False),
        sa.Column('page_speed', sa.Integer, nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('sections', json_type, nullable=False),
        sa.Column('checklist', json_type, nullable=False),
    )
    op.create_index('ix_ux_audit_results_url', 'ux_audit_results', ['url'])
    op.create_index('ix_ux_audit_results_created_at', 'ux_audit_results', ['created_at'])


def downgrade():
    op.drop_index('ix_ux_audit_results_created_at', table_name='ux_audit_results')
    op.drop_index('ix_ux_audit_results_url', table_name='ux_audit_results')
    op.drop_table('ux_audit_results')
