import uuid
from datetime import datetime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import ForeignKey, Text, DateTime, Index
from synapse.db.session import Base

class Message(Base):
    """chat message (append-only); kept when sender or receiver is deleted"""
    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_thread_created", "thread_id", "created_at"),
    )
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    thread_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("thread.id"), nullable=False)
    sender_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    receiver_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    text: Mapped[str] = mapped_column(Text, nullable=False)
    # set by the send transaction so it matches Thread.last_message_at exactly
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
