import uuid
from datetime import datetime, timezone
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import Text, ForeignKey, DateTime, Integer, UniqueConstraint, CheckConstraint
from synapse.db.session import Base


def canonical_pair(user_a: uuid.UUID, user_b: uuid.UUID) -> tuple[uuid.UUID, uuid.UUID]:
    """Sorted form of an unordered participant pair; the storage key of a Thread."""
    return (user_a, user_b) if user_a <= user_b else (user_b, user_a)


class Thread(Base):
    """Conversation summary, one row per unordered pair of participants.

    Participants are stored in canonical (sorted) order so that the unique
    constraint over ``(participant_low, participant_high)`` enforces "at most
    one thread per pair" at the storage layer. Participant ids are plain
    columns rather than foreign keys: a thread outlives a deleted user and
    simply drops out of the other side's listing.
    """
    __tablename__ = "thread"
    __table_args__ = (
        UniqueConstraint("participant_low", "participant_high", name="uq_thread_participants"),
        CheckConstraint("participant_low <> participant_high", name="distinct_participants"),
    )
    id: Mapped[uuid.UUID] = mapped_column(primary_key=True, default=uuid.uuid4)
    participant_low: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    participant_high: Mapped[uuid.UUID] = mapped_column(nullable=False, index=True)
    last_message: Mapped[str] = mapped_column(Text, default="")
    last_message_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    last_message_sender_id: Mapped[uuid.UUID] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    @property
    def participants(self) -> tuple[uuid.UUID, uuid.UUID]:
        return (self.participant_low, self.participant_high)

    def has_participant(self, user_id: uuid.UUID) -> bool:
        return user_id in self.participants

    def other_participant(self, user_id: uuid.UUID) -> uuid.UUID:
        return self.participant_high if user_id == self.participant_low else self.participant_low


class ThreadUnread(Base):
    """Per-participant unread counter of a thread.

    Only ever touched through single-row ``UPDATE`` statements
    (``count = count + 1`` / ``count = 0``), never read-modify-write.
    """
    __tablename__ = "thread_unread"
    thread_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("thread.id"), primary_key=True)
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), primary_key=True, index=True
    )
    count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
