"""create_products_and_invoices

Revision ID: a1f0c2d3e4b5
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f0c2d3e4b5'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create products, invoices and invoice_items tables."""
    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('sku', sa.String(length=50), nullable=True),
        sa.Column('category', sa.String(length=255), nullable=True),
        sa.Column('unit_price', sa.Numeric(precision=20, scale=4), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit', sa.String(length=50), nullable=True),
        sa.Column('threshold', sa.Integer(), nullable=True),
        sa.Column('expiry_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'status',
            sa.Enum('IN_STOCK', 'LOW_STOCK', 'OUT_OF_STOCK', 'EXPIRED', name='productstatus'),
            nullable=False,
        ),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('unit_price >= 0', name='ck_product_unit_price_non_negative'),
        sa.CheckConstraint('quantity >= 0', name='ck_product_quantity_non_negative'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_status', 'products', ['status'])
    op.create_index('ix_products_expiry_date', 'products', ['expiry_date'])
    op.create_index('ix_products_created_at', 'products', ['created_at'])

    op.create_table(
        'invoices',
        sa.Column('seq', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('invoice_code', sa.String(length=50), nullable=False),
        sa.Column('subtotal', sa.Numeric(precision=20, scale=4), nullable=False),
        sa.Column('tax', sa.Numeric(precision=20, scale=4), nullable=False),
        sa.Column('total', sa.Numeric(precision=20, scale=4), nullable=False),
        sa.Column('status', sa.Enum('UNPAID', 'PAID', name='invoicestatus'), nullable=False),
        sa.Column('reference_number', sa.String(length=50), nullable=True),
        sa.Column('due_date', sa.DateTime(timezone=True), nullable=True),
        sa.Column('viewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('subtotal >= 0', name='ck_invoice_subtotal_non_negative'),
        sa.CheckConstraint('tax >= 0', name='ck_invoice_tax_non_negative'),
        sa.CheckConstraint('total >= 0', name='ck_invoice_total_non_negative'),
        sa.PrimaryKeyConstraint('seq'),
        sa.UniqueConstraint('id'),
        sa.UniqueConstraint('invoice_code'),
    )
    op.create_index('ix_invoices_status', 'invoices', ['status'])
    op.create_index('ix_invoices_created_at', 'invoices', ['created_at'])

    op.create_table(
        'invoice_items',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('invoice_id', sa.Uuid(), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.Numeric(precision=20, scale=4), nullable=False),
        sa.Column('line_total', sa.Numeric(precision=20, scale=4), nullable=False),
        sa.CheckConstraint('quantity >= 0', name='ck_invoice_item_qty_non_negative'),
        sa.ForeignKeyConstraint(['invoice_id'], ['invoices.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_invoice_items_invoice', 'invoice_items', ['invoice_id'])
    op.create_index('ix_invoice_items_name', 'invoice_items', ['name'])


def downgrade() -> None:
    """Drop invoice_items, invoices and products tables."""
    op.drop_index('ix_invoice_items_name', table_name='invoice_items')
    op.drop_index('ix_invoice_items_invoice', table_name='invoice_items')
    op.drop_table('invoice_items')
    op.drop_index('ix_invoices_created_at', table_name='invoices')
    op.drop_index('ix_invoices_status', table_name='invoices')
    op.drop_table('invoices')
    op.drop_index('ix_products_created_at', table_name='products')
    op.drop_index('ix_products_expiry_date', table_name='products')
    op.drop_index('ix_products_status', table_name='products')
    op.drop_index('ix_products_name', table_name='products')
    op.drop_table('products')
    op.execute("DROP TYPE IF EXISTS invoicestatus")
    op.execute("DROP TYPE IF EXISTS productstatus")
