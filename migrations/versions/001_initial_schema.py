"""Initial schema: vehicles, trips and their ordered waypoints.

Revision ID: 001
Create Date: 2026-10-18
"""

from alembic import op
import sqlalchemy as sa


revision = "001"
down_revision = None
branch_labels = None
depends_on = None

TRIP_STATUSES = (
    "UNKNOWN_TRIP_STATUS",
    "NEW",
    "ENROUTE_TO_PICKUP",
    "ARRIVED_AT_PICKUP",
    "ENROUTE_TO_INTERMEDIATE_DESTINATION",
    "ARRIVED_AT_INTERMEDIATE_DESTINATION",
    "ENROUTE_TO_DROPOFF",
    "COMPLETE",
    "CANCELED",
)


def upgrade() -> None:
    # ── vehicles ──────────────────────────────────────────────────────
    op.create_table(
        "vehicles",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "vehicle_state",
            sa.Enum("ONLINE", "OFFLINE", name="vehiclestate"),
            nullable=False,
        ),
        sa.Column("back_to_back_enabled", sa.Boolean, nullable=False),
        sa.Column("maximum_capacity", sa.Integer, nullable=False),
        sa.Column("supported_trip_types", sa.JSON),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )

    # ── trips ─────────────────────────────────────────────────────────
    op.create_table(
        "trips",
        sa.Column("id", sa.String(64), primary_key=True),
        sa.Column(
            "vehicle_id",
            sa.String(64),
            sa.ForeignKey("vehicles.id"),
            nullable=False,
        ),
        sa.Column(
            "status", sa.Enum(*TRIP_STATUSES, name="tripstatus"), nullable=False
        ),
        sa.Column(
            "trip_type",
            sa.Enum("EXCLUSIVE", "SHARED", name="triptype"),
            nullable=False,
        ),
        sa.Column(
            "intermediate_destination_index",
            sa.Integer,
            nullable=False,
            server_default="-1",
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
        ),
    )
    op.create_index("idx_trips_vehicle", "trips", ["vehicle_id"])
    op.create_index("idx_trips_status", "trips", ["status"])

    # ── waypoints ─────────────────────────────────────────────────────
    op.create_table(
        "waypoints",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "vehicle_id",
            sa.String(64),
            sa.ForeignKey("vehicles.id"),
            nullable=False,
        ),
        sa.Column(
            "trip_id", sa.String(64), sa.ForeignKey("trips.id"), nullable=False
        ),
        sa.Column("position", sa.Integer, nullable=False),
        sa.Column("waypoint_type", sa.String(64), nullable=False),
        sa.Column("latitude", sa.Float, nullable=False),
        sa.Column("longitude", sa.Float, nullable=False),
        sa.Column(
            "is_pending", sa.Boolean, nullable=False, server_default=sa.true()
        ),
    )
    op.create_index(
        "idx_waypoints_vehicle_position", "waypoints", ["vehicle_id", "position"]
    )
    op.create_index("idx_waypoints_trip", "waypoints", ["trip_id"])


def downgrade() -> None:
    op.drop_table("waypoints")
    op.drop_table("trips")
    op.drop_table("vehicles")
    op.execute("DROP TYPE IF EXISTS tripstatus")
    op.execute("DROP TYPE IF EXISTS triptype")
    op.execute("DROP TYPE IF EXISTS vehiclestate")
