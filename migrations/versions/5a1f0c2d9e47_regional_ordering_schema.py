"""regional ordering schema

Revision ID: 5a1f0c2d9e47
Revises:
Create Date: 2026-10-19 09:00:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5a1f0c2d9e47'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'account',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('username', sa.String(length=80), nullable=False, unique=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=20), nullable=False),
        sa.Column('region', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_table(
        'vendor',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('address', sa.String(length=255), nullable=False),
        sa.Column('region', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_vendor_region', 'vendor', ['region'])
    op.create_table(
        'vendor_menu_item',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('vendor_id', sa.Integer(), sa.ForeignKey('vendor.id'), nullable=False),
        sa.Column('catalog_entry_id', sa.Integer(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.UniqueConstraint('vendor_id', 'catalog_entry_id', name='uq_menu_vendor_entry'),
    )
    op.create_index('ix_vendor_menu_item_vendor_id', 'vendor_menu_item', ['vendor_id'])
    op.create_table(
        'catalog_entry',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('vendor_id', sa.Integer(), sa.ForeignKey('vendor.id'), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('region', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_catalog_entry_vendor_id', 'catalog_entry', ['vendor_id'])
    op.create_index('ix_catalog_entry_region', 'catalog_entry', ['region'])
    op.create_table(
        'order',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('owner_account_id', sa.String(length=64), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=False),
        sa.Column('region', sa.String(length=50), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('version', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_order_region_status', 'order', ['region', 'status'])
    op.create_table(
        'order_line_item',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('order_id', sa.BigInteger(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('catalog_entry_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('captured_region', sa.String(length=50), nullable=False),
        sa.Column('captured_unit_price', sa.Numeric(10, 2), nullable=False),
    )
    op.create_index('ix_order_line_item_order_id', 'order_line_item', ['order_id'])
    op.create_index('ix_order_line_item_catalog_entry_id', 'order_line_item', ['catalog_entry_id'])
    op.create_table(
        'order_status_log',
        sa.Column('id', sa.BigInteger(), primary_key=True),
        sa.Column('order_id', sa.BigInteger(), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('status', sa.String(length=30), nullable=False),
        sa.Column('updated_by', sa.String(length=64), nullable=False),
        sa.Column('timestamp', sa.DateTime(), server_default=sa.func.now(), nullable=True),
    )
    op.create_index('ix_order_status_log_order_id', 'order_status_log', ['order_id'])


def downgrade():
    op.drop_index('ix_order_status_log_order_id', table_name='order_status_log')
    op.drop_table('order_status_log')
    op.drop_index('ix_order_line_item_catalog_entry_id', table_name='order_line_item')
    op.drop_index('ix_order_line_item_order_id', table_name='order_line_item')
    op.drop_table('order_line_item')
    op.drop_index('ix_order_region_status', table_name='order')
    op.drop_table('order')
    op.drop_index('ix_catalog_entry_region', table_name='catalog_entry')
    op.drop_index('ix_catalog_entry_vendor_id', table_name='catalog_entry')
    op.drop_table('catalog_entry')
    op.drop_index('ix_vendor_menu_item_vendor_id', table_name='vendor_menu_item')
    op.drop_table('vendor_menu_item')
    op.drop_index('ix_vendor_region', table_name='vendor')
    op.drop_table('vendor')
    op.drop_table('account')
