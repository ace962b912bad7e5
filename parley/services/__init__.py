# Core chat services
from parley.services.chat_service import ChatService, get_chat_service
from parley.services.datastore import DataStore
from parley.services.directory import Directory
from parley.services.messages import MessageStore
from parley.services.notifications import NotificationFeed
from parley.services.standups import StandupBuffer
from parley.services.stats import StatsTracker
from parley.services.tagger import HandleTagger

__all__ = [
    "ChatService",
    "get_chat_service",
    "DataStore",
    "Directory",
    "MessageStore",
    "NotificationFeed",
    "StandupBuffer",
    "StatsTracker",
    "HandleTagger",
]
