"""Create restaurants, users, reservations, notifications and admin logs

Revision ID: 0001_initial_schema
Revises:
Create Date: 2025-06-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('restaurants',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=50), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('food_type', sa.String(length=50), nullable=True),
        sa.Column('address', sa.String(length=255), nullable=True),
        sa.Column('province', sa.String(length=100), nullable=True),
        sa.Column('district', sa.String(length=100), nullable=True),
        sa.Column('postalcode', sa.String(length=5), nullable=True),
        sa.Column('tel', sa.String(length=15), nullable=True),
        sa.Column('img_path', sa.String(length=500), nullable=True),
        sa.Column('open_time', sa.String(length=5), nullable=False),
        sa.Column('close_time', sa.String(length=5), nullable=False),
        sa.Column('timezone', sa.String(length=64), nullable=False),
        sa.Column('max_reservation', sa.Integer(), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.CheckConstraint('max_reservation >= 0', name='ck_restaurant_max_reservation'),
        sa.CheckConstraint('close_time > open_time', name='ck_restaurant_hours_order'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_restaurants_id', 'restaurants', ['id'], unique=False)

    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('tel', sa.String(length=15), nullable=True),
        sa.Column('role', sa.Enum('admin', 'restaurantManager', 'user', name='userrole'), nullable=False),
        sa.Column('verified', sa.Boolean(), nullable=True),
        sa.Column('restaurant_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_id', 'users', ['id'], unique=False)
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'], unique=False)
    op.create_index('ix_users_restaurant_id', 'users', ['restaurant_id'], unique=False)

    op.create_table('reservations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=False),
        sa.Column('rev_date', sa.DateTime(), nullable=False),
        sa.Column('number_of_people', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=True),
        sa.CheckConstraint('number_of_people >= 1', name='ck_reservation_party_size'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sqlite_autoincrement=True
    )
    op.create_index('ix_reservations_id', 'reservations', ['id'], unique=False)
    op.create_index('ix_reservations_rev_date', 'reservations', ['rev_date'], unique=False)
    op.create_index('idx_reservation_restaurant_date', 'reservations', ['restaurant_id', 'rev_date'], unique=False)
    op.create_index('idx_reservation_user_date', 'reservations', ['user_id', 'rev_date'], unique=False)

    op.create_table('notifications',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('creator_id', sa.Integer(), nullable=True),
        sa.Column('created_by', sa.Enum('admin', 'restaurantManager', 'system', name='notificationcreator'), nullable=False),
        sa.Column('restaurant_id', sa.Integer(), nullable=True),
        sa.Column('target_audience', sa.String(length=64), nullable=False),
        sa.Column('kind', sa.Enum('announcement', 'reminder', 'cancellation', name='notificationkind'), nullable=False),
        sa.Column('recipient_id', sa.Integer(), nullable=True),
        sa.Column('publish_at', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), server_default=sa.text('(CURRENT_TIMESTAMP)'), nullable=False),
        sa.ForeignKeyConstraint(['restaurant_id'], ['restaurants.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_notifications_id', 'notifications', ['id'], unique=False)
    op.create_index('ix_notifications_creator_id', 'notifications', ['creator_id'], unique=False)
    op.create_index('ix_notifications_restaurant_id', 'notifications', ['restaurant_id'], unique=False)
    op.create_index('ix_notifications_target_audience', 'notifications', ['target_audience'], unique=False)
    op.create_index('ix_notifications_recipient_id', 'notifications', ['recipient_id'], unique=False)
    op.create_index('ix_notifications_publish_at', 'notifications', ['publish_at'], unique=False)
    op.create_index('idx_notification_audience_publish', 'notifications', ['target_audience', 'publish_at'], unique=False)
    op.create_index('idx_notification_creator_publish', 'notifications', ['creator_id', 'publish_at'], unique=False)

    op.create_table('admin_logs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('admin_id', sa.Integer(), nullable=False),
        sa.Column('action', sa.String(length=50), nullable=False),
        sa.Column('resource', sa.String(length=50), nullable=False),
        sa.Column('resource_id', sa.Integer(), nullable=True),
        sa.Column('timestamp', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_admin_logs_id', 'admin_logs', ['id'], unique=False)
    op.create_index('ix_admin_logs_admin_id', 'admin_logs', ['admin_id'], unique=False)
    op.create_index('ix_admin_logs_timestamp', 'admin_logs', ['timestamp'], unique=False)
    op.create_index('idx_admin_log_resource', 'admin_logs', ['resource', 'resource_id'], unique=False)


def downgrade():
    op.drop_table('admin_logs')
    op.drop_table('notifications')
    op.drop_table('reservations')
    op.drop_table('users')
    op.drop_table('restaurants')

    # Enum types are separate objects on PostgreSQL
    bind = op.get_bind()
    if bind.dialect.name == 'postgresql':
        for enum_name in ('notificationkind', 'notificationcreator', 'userrole'):
            op.execute(f'DROP TYPE IF EXISTS {enum_name}')
