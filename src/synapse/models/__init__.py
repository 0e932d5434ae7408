from .user import User
from .thread import Thread, ThreadUnread
from .message import Message

__all__ = ["User", "Thread", "ThreadUnread", "Message"]
