"""Configuration models for Colloquy."""

from pydantic import BaseModel, Field, ValidationInfo, field_validator

from colloquy.config.settings import SettingsConfig
from colloquy.core.commands import ActionTarget
from colloquy.core.constants import DEVICE_PREFIX

# DSL Version constants
SUPPORTED_VERSIONS = frozenset({"1.0"})
CURRENT_VERSION = "1.0"


class ActionConfig(BaseModel):
    """Catalog entry for one action name (e.g. ``tt:device.action.post``).

    ``devices`` maps a device-kind atom to the target invoked for it.
    ``fallback`` lists device atoms, in order, to fall back on when the
    utterance names no device (or one the action has no entry for).
    """

    devices: dict[str, ActionTarget] = Field(
        default_factory=dict, description="Device atom -> kind/channel/schema"
    )
    fallback: list[str] = Field(
        default_factory=list, description="Device atoms tried when no exact device matches"
    )
    description: str | None = Field(default=None, description="Human readable summary")

    @field_validator("devices")
    @classmethod
    def _device_atoms_are_namespaced(cls, v: dict[str, ActionTarget]) -> dict[str, ActionTarget]:
        bad = [name for name in v if not name.startswith(DEVICE_PREFIX)]
        if bad:
            raise ValueError(f"Device keys must start with '{DEVICE_PREFIX}': {bad}")
        return v

    @field_validator("fallback")
    @classmethod
    def _fallback_is_known(cls, v: list[str], info: ValidationInfo) -> list[str]:
        devices = info.data.get("devices", {})
        missing = [name for name in v if name not in devices]
        if missing:
            raise ValueError(f"Fallback references unknown devices: {missing}")
        return v


class SandboxDevice(BaseModel):
    """Device exposed by the in-memory directory used by the CLI."""

    id: str
    name: str


class SandboxConfig(BaseModel):
    """In-memory collaborators for interactive sessions."""

    devices: dict[str, list[SandboxDevice]] = Field(
        default_factory=dict, description="Device kind -> available devices"
    )
    installed_apps: dict[str, str] = Field(
        default_factory=dict, description="App id -> display name"
    )
    identity: str | None = Field(
        default=None, description="Display name the identity lookup returns"
    )


class ColloquyConfig(BaseModel):
    """Top-level configuration file."""

    version: str = Field(default=CURRENT_VERSION)
    settings: SettingsConfig = Field(default_factory=SettingsConfig)
    actions: dict[str, ActionConfig] = Field(default_factory=dict)
    sandbox: SandboxConfig = Field(default_factory=SandboxConfig)

    @field_validator("version")
    @classmethod
    def _supported_version(cls, v: str) -> str:
        if v not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported config version '{v}'. Supported: {sorted(SUPPORTED_VERSIONS)}"
            )
        return v
