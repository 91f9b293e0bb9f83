"""nestbot: Messenger webhook bot for weather and news."""

from .actions import ActionRegistry, BotActions, first_entity_value
from .app import Application, IApplication
from .cache import DerivedDataCache, IDerivedDataCache
from .config import Settings
from .dialogue import ConversationDriver, IConversationDriver
from .engine import BaseDialogueEngine, IDialogueEngine, LLMDialogueEngine, WitEngine
from .llm import ILLMProvider, LLMProvider
from .messenger import IMessengerClient, MessengerClient
from .models import ActionRequest, BotResponse, Context, EngineStep, Session, StepType, TraceEvent
from .sessions import ISessionStore, SessionStore
from .storage import IStorage, Storage
from .tracker import ITracker, Tracker

__all__ = [
    # Application
    "Application",
    "IApplication",
    "Settings",
    # Models
    "Context",
    "Session",
    "ActionRequest",
    "BotResponse",
    "EngineStep",
    "StepType",
    "TraceEvent",
    # Components
    "ISessionStore",
    "SessionStore",
    "IDerivedDataCache",
    "DerivedDataCache",
    "ActionRegistry",
    "BotActions",
    "first_entity_value",
    "IDialogueEngine",
    "BaseDialogueEngine",
    "WitEngine",
    "LLMDialogueEngine",
    "ILLMProvider",
    "LLMProvider",
    "IConversationDriver",
    "ConversationDriver",
    "IMessengerClient",
    "MessengerClient",
    "IStorage",
    "Storage",
    "ITracker",
    "Tracker",
]
