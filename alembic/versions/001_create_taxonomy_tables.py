"""Create taxonomy tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create registry, class and product tables."""
    # Registries
    op.create_table(
        'organizational_units',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(250), nullable=False, unique=True),
        sa.Column('short_name', sa.String(20), nullable=False, server_default=''),
        sa.CheckConstraint('length(name) > 0', name='ck_units_name_not_empty'),
    )

    op.create_table(
        'value_types',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(20), nullable=False, unique=True),
        sa.CheckConstraint('length(name) > 0', name='ck_value_types_name_not_empty'),
    )

    op.create_table(
        'params',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(200), nullable=False, unique=True),
        sa.Column('value_type_id', sa.Integer(),
                  sa.ForeignKey('value_types.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('unit_id', sa.Integer(),
                  sa.ForeignKey('organizational_units.id', ondelete='SET NULL'), nullable=True),
        sa.CheckConstraint('length(name) > 0', name='ck_params_name_not_empty'),
    )

    # Class tree
    op.create_table(
        'classes',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(300), nullable=False, unique=True),
        sa.Column('parent_id', sa.Integer(),
                  sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=True, index=True),
        sa.Column('unit_id', sa.Integer(),
                  sa.ForeignKey('organizational_units.id', ondelete='CASCADE'), nullable=False),
        sa.CheckConstraint('length(name) > 0', name='ck_classes_name_not_empty'),
    )

    op.create_unique_constraint(
        'uq_classes_id_parent',
        'classes',
        ['id', 'parent_id'],
    )

    op.create_table(
        'class_params',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('class_id', sa.Integer(),
                  sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.Column('param_id', sa.Integer(),
                  sa.ForeignKey('params.id', ondelete='CASCADE'), nullable=False),
    )

    op.create_unique_constraint(
        'uq_class_params_class_param',
        'class_params',
        ['class_id', 'param_id'],
    )

    # Products
    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('name', sa.String(300), nullable=False, unique=True),
        sa.Column('class_id', sa.Integer(),
                  sa.ForeignKey('classes.id', ondelete='CASCADE'), nullable=False, index=True),
        sa.CheckConstraint('length(name) > 0', name='ck_products_name_not_empty'),
    )

    op.create_table(
        'product_param_values',
        sa.Column('product_id', sa.Integer(),
                  sa.ForeignKey('products.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('class_param_id', sa.Integer(),
                  sa.ForeignKey('class_params.id', ondelete='CASCADE'), primary_key=True),
        sa.Column('value', sa.String(300), nullable=False, server_default=''),
    )


def downgrade() -> None:
    """Drop taxonomy tables."""
    op.drop_table('product_param_values')
    op.drop_table('products')
    op.drop_table('class_params')
    op.drop_table('classes')
    op.drop_table('params')
    op.drop_table('value_types')
    op.drop_table('organizational_units')
