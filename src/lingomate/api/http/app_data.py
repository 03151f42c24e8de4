from dataclasses import dataclass

from src.lingomate.core.services import (
    ChatBridge,
    DbSessionService,
    SessionSettings,
)
from src.lingomate.runtime.config.config_data import ConfigData


@dataclass
class ApplicationDependencies:
    config: ConfigData
    session_settings: SessionSettings
    database_service: DbSessionService
    chat_bridge: ChatBridge
