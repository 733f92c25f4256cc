import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from community_moderation.models.base import IDModel, TimestampModel
from community_moderation.models.enums import QueueType, enum_column


class QueueEntry(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'moderation_queue_entries'
    __table_args__ = (sa.UniqueConstraint('queue_type', 'report_id', name='uq_queue_entry_queue_report'),)

    queue_type: QueueType = Field(sa_column=enum_column(QueueType, 'queue_entry_type', index=True))
    report_id: str = Field(index=True)
