"""Initial schema: location reference data, races, measures, events, ballots, decisions, cards, users, analytics.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects.postgresql import JSONB

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_JSON = sa.JSON().with_variant(JSONB(), "postgresql")


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    # Location reference data
    op.create_table(
        "zipcodes",
        sa.Column("zipcode", sa.String(5), primary_key=True),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("county", sa.String(100), nullable=False),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("latitude", sa.Float, nullable=True),
        sa.Column("longitude", sa.Float, nullable=True),
    )
    op.create_index("ix_zipcodes_state", "zipcodes", ["state"])

    op.create_table(
        "districts",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("district_type", sa.String(50), nullable=False),
        sa.Column("number", sa.String(20), nullable=True),
        sa.Column("name", sa.String(200), nullable=False),
    )
    op.create_index("ix_districts_state", "districts", ["state"])

    op.create_table(
        "zipcode_districts",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("zipcode", sa.String(5), sa.ForeignKey("zipcodes.zipcode"), nullable=False),
        sa.Column("district_id", sa.String(100), sa.ForeignKey("districts.id"), nullable=False),
        sa.UniqueConstraint("zipcode", "district_id", name="uq_zipcode_district"),
    )
    op.create_index("ix_zipcode_districts_zipcode", "zipcode_districts", ["zipcode"])

    # Races, candidates, endorsements
    op.create_table(
        "races",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("election_year", sa.Integer, nullable=False),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("race_type", sa.String(50), nullable=False),
        sa.Column("office", sa.String(200), nullable=False),
        sa.Column("position", sa.String(200), nullable=True),
        sa.Column("is_primary", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("primary_type", sa.String(50), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("district_id", sa.String(100), sa.ForeignKey("districts.id"), nullable=True),
    )
    op.create_index("ix_races_district_id", "races", ["district_id"])
    op.create_index("ix_races_state", "races", ["state"])

    op.create_table(
        "candidates",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("party", sa.String(50), nullable=True),
        sa.Column("incumbent_status", sa.String(50), nullable=True),
        sa.Column("photo_url", sa.String(500), nullable=True),
        sa.Column("website_url", sa.String(500), nullable=True),
        sa.Column("bio", sa.Text, nullable=True),
        sa.Column("position", sa.Text, nullable=True),
    )

    op.create_table(
        "race_candidates",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("race_id", sa.String(100), sa.ForeignKey("races.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "candidate_id",
            sa.String(100),
            sa.ForeignKey("candidates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("primary_votes", sa.Integer, nullable=True),
        sa.Column("primary_percentage", sa.Float, nullable=True),
        sa.Column("is_won_primary", sa.Boolean, nullable=True),
        sa.UniqueConstraint("race_id", "candidate_id", name="uq_race_candidate"),
    )
    op.create_index("ix_race_candidates_race_id", "race_candidates", ["race_id"])

    op.create_table(
        "candidate_endorsements",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column(
            "candidate_id",
            sa.String(100),
            sa.ForeignKey("candidates.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("organization", sa.String(200), nullable=False),
        sa.Column("endorsement_type", sa.String(50), nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
    )
    op.create_index("ix_candidate_endorsements_candidate_id", "candidate_endorsements", ["candidate_id"])

    # Ballot measures
    op.create_table(
        "ballot_measures",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("election_year", sa.Integer, nullable=False),
        sa.Column("measure_number", sa.String(50), nullable=False),
        sa.Column("title", sa.String(500), nullable=False),
        sa.Column("short_title", sa.String(200), nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(50), nullable=True),
        sa.Column("fiscal_impact", sa.Text, nullable=True),
        sa.Column("pro_arguments", _JSON, nullable=True),
        sa.Column("con_arguments", _JSON, nullable=True),
    )
    op.create_index("ix_ballot_measures_state", "ballot_measures", ["state"])

    # Users
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("username", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("profile_image_url", sa.String(500), nullable=True),
        sa.Column("zip_code", sa.String(5), nullable=True),
        sa.Column("state", sa.String(2), nullable=True),
        sa.Column("county", sa.String(100), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    # Election events and subscriptions
    op.create_table(
        "election_events",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("county", sa.String(100), nullable=True),
        sa.Column("title", sa.String(300), nullable=False),
        sa.Column("event_type", sa.String(20), nullable=False),
        sa.Column("election_date", sa.Date, nullable=False),
        sa.Column("registration_deadline", sa.Date, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("ballot_id", sa.String(200), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="upcoming"),
        sa.Column("visibility", sa.String(20), nullable=False, server_default="private"),
        sa.Column("archived", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("status IN ('upcoming', 'passed')", name="ck_election_event_status"),
        sa.CheckConstraint("visibility IN ('public', 'private')", name="ck_election_event_visibility"),
    )
    op.create_index("ix_election_events_state", "election_events", ["state"])
    op.create_index("ix_election_events_election_date", "election_events", ["election_date"])

    op.create_table(
        "event_subscriptions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("visitor_id", sa.String(100), nullable=False),
        sa.Column(
            "event_id",
            sa.String(100),
            sa.ForeignKey("election_events.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("notify_on_update", sa.Boolean, nullable=False, server_default="true"),
        *_timestamps(),
        sa.UniqueConstraint("visitor_id", "event_id", name="uq_event_subscription_visitor_event"),
    )
    op.create_index("ix_event_subscriptions_visitor_id", "event_subscriptions", ["visitor_id"])

    # Cached ballots
    op.create_table(
        "ballots",
        sa.Column("id", sa.String(200), primary_key=True),
        sa.Column("event_id", sa.String(100), nullable=False),
        sa.Column("zipcode", sa.String(5), nullable=False),
        sa.Column("state", sa.String(2), nullable=False),
        sa.Column("county", sa.String(100), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("election_date", sa.Date, nullable=True),
        sa.Column("election_type", sa.String(20), nullable=True),
        sa.Column("race_ids", _JSON, nullable=False),
        sa.Column("measure_ids", _JSON, nullable=False),
        sa.Column("races", _JSON, nullable=False),
        sa.Column("measures", _JSON, nullable=False),
        sa.Column("candidates", _JSON, nullable=False),
        sa.Column("races_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("measures_count", sa.Integer, nullable=False, server_default="0"),
        sa.Column("last_updated", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_ballots_event_id", "ballots", ["event_id"])
    op.create_index("ix_ballots_zipcode", "ballots", ["zipcode"])

    # Visitor decisions
    op.create_table(
        "voter_decisions",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("visitor_id", sa.String(100), nullable=False),
        sa.Column("ballot_id", sa.String(200), nullable=False),
        sa.Column("event_id", sa.String(100), nullable=True),
        sa.Column("measure_decisions", _JSON, nullable=False),
        sa.Column("candidate_selections", _JSON, nullable=False),
        sa.Column("notes", _JSON, nullable=False),
        sa.Column("shared", sa.Boolean, nullable=False, server_default="false"),
        *_timestamps(),
        sa.UniqueConstraint("visitor_id", "ballot_id", name="uq_voter_decision_visitor_ballot"),
    )
    op.create_index("ix_voter_decisions_visitor_id", "voter_decisions", ["visitor_id"])

    # Finalized voter cards
    op.create_table(
        "finalized_voter_cards",
        sa.Column("id", sa.String(100), primary_key=True),
        sa.Column("user_id", sa.Uuid, sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("visitor_id", sa.String(100), nullable=False),
        sa.Column("event_id", sa.String(100), sa.ForeignKey("election_events.id"), nullable=False),
        sa.Column("ballot_id", sa.String(200), nullable=True),
        sa.Column("template", sa.String(20), nullable=False),
        sa.Column("location", sa.String(200), nullable=False),
        sa.Column("state", sa.String(2), nullable=True),
        sa.Column("election_date", sa.String(50), nullable=False),
        sa.Column("election_type", sa.String(50), nullable=False),
        sa.Column("decisions", _JSON, nullable=False),
        sa.Column("show_notes", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("share_url", sa.String(500), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_finalized_voter_cards_visitor_id", "finalized_voter_cards", ["visitor_id"])
    op.create_index("ix_finalized_voter_cards_user_id", "finalized_voter_cards", ["user_id"])
    op.create_index("ix_finalized_voter_cards_event_id", "finalized_voter_cards", ["event_id"])

    # Analytics
    op.create_table(
        "analytics_events",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("event_type", sa.String(50), nullable=False),
        sa.Column("event_data", _JSON, nullable=True),
        sa.Column("visitor_id", sa.String(100), nullable=True),
        sa.Column("state", sa.String(2), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_analytics_events_event_type", "analytics_events", ["event_type"])
    op.create_index("ix_analytics_events_created_at", "analytics_events", ["created_at"])


def downgrade() -> None:
    op.drop_table("analytics_events")
    op.drop_table("finalized_voter_cards")
    op.drop_table("voter_decisions")
    op.drop_table("ballots")
    op.drop_table("event_subscriptions")
    op.drop_table("election_events")
    op.drop_table("users")
    op.drop_table("ballot_measures")
    op.drop_table("candidate_endorsements")
    op.drop_table("race_candidates")
    op.drop_table("candidates")
    op.drop_table("races")
    op.drop_table("zipcode_districts")
    op.drop_table("districts")
    op.drop_table("zipcodes")
