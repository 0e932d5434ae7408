# Re-export primary service layer entry points for convenience.
from .user import (
    create_user,
    get_user_or_404,
    get_user_by_email_or_404,
    delete_user,
    update_user,
    update_user_email,
    list_users,
    UserNotFoundError,
    DuplicateEmailError,
)
from .thread import (
    ThreadSummary,
    get_thread_or_404,
    mark_thread_read,
    list_threads_for_user,
    has_unread_messages,
    ThreadNotFoundError,
    NotParticipantError,
)
from .message import (
    SendResult,
    send_message,
    get_transcript,
    get_message_or_404,
    MessageNotFoundError,
)

__all__ = [
    # user
    "create_user",
    "get_user_or_404",
    "get_user_by_email_or_404",
    "delete_user",
    "update_user",
    "update_user_email",
    "list_users",
    "UserNotFoundError",
    "DuplicateEmailError",
    # thread
    "ThreadSummary",
    "get_thread_or_404",
    "mark_thread_read",
    "list_threads_for_user",
    "has_unread_messages",
    "ThreadNotFoundError",
    "NotParticipantError",
    # message
    "SendResult",
    "send_message",
    "get_transcript",
    "get_message_or_404",
    "MessageNotFoundError",
]
