from dataclasses import dataclass, field

from colloquy.config.settings import SettingsConfig
from colloquy.core.interfaces import (
    AppRegistry,
    DeviceDirectory,
    IdentityResolver,
    KeywordStore,
    PreferenceStore,
    SemanticParser,
)
from colloquy.runtime.memory import PassthroughNLU
from colloquy.semantics.catalog import ActionCatalog


@dataclass(frozen=True)
class SessionServices:
    """Collaborators injected into a conversation session.

    Contexts reach these through the ``ConversationManager`` they are
    handed on every call; nothing is looked up globally.
    """

    catalog: ActionCatalog
    devices: DeviceDirectory
    preferences: PreferenceStore
    keywords: KeywordStore
    identity: IdentityResolver
    apps: AppRegistry
    settings: SettingsConfig = field(default_factory=SettingsConfig)
    nlu: SemanticParser = field(default_factory=PassthroughNLU)
