"""Configuration module for Colloquy."""

from colloquy.config.loader import ConfigLoader
from colloquy.config.models import ActionConfig, ColloquyConfig, SandboxConfig
from colloquy.config.settings import SettingsConfig

__all__ = ["ActionConfig", "ColloquyConfig", "ConfigLoader", "SandboxConfig", "SettingsConfig"]
