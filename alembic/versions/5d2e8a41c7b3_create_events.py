"""create events

Revision ID: 5d2e8a41c7b3
Revises:
Create Date: 2026-10-17 09:12:40.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "5d2e8a41c7b3"
down_revision: Union[str, Sequence[str], None] = None
branch_labels = None
depends_on = None

TEXT_COLUMNS = [
    "time", "location", "city", "state", "country", "latitude", "longitude",
    "craft_type", "craft_size", "craft_behavior", "color", "sound_or_noise",
    "light_characteristics", "witnesses", "eyewitness", "duration", "weather",
    "photo", "video", "radar", "entity_type", "close_encounter_scale",
    "telepathic_communication", "physical_effects", "temporal_distortions",
    "credibility", "notoriety", "government_involvement", "recurring_sightings",
    "artifacts_or_relics", "media_link", "detailed_summary", "symbols",
]


def upgrade() -> None:
    op.create_table(
        "events",
        sa.Column("id", sa.String(), primary_key=True),
        sa.Column("title", sa.String(), nullable=False),
        sa.Column("category", sa.String(), nullable=False),
        sa.Column("date", sa.String(), nullable=False),
        *[sa.Column(name, sa.String(), nullable=True) for name in TEXT_COLUMNS],
        sa.Column("deep_dive_content", sa.JSON(), nullable=True),
        sa.Column("likes", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("dislikes", sa.Integer(), nullable=False, server_default="0"),
    )
    with op.batch_alter_table("events") as batch_op:
        batch_op.create_index(batch_op.f("ix_events_category"), ["category"], unique=False)


def downgrade() -> None:
    with op.batch_alter_table("events") as batch_op:
        batch_op.drop_index(batch_op.f("ix_events_category"))
    op.drop_table("events")
