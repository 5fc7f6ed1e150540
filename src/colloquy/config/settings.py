"""Settings configuration models.

Global settings for the assistant persona, onboarding and logging.
"""

from typing import Literal

from pydantic import BaseModel, Field

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class PreferenceKeys(BaseModel):
    """Keys used in the persistent preference store."""

    name: str = Field(default="sabrina-name", description="User display name")
    initialized: str = Field(
        default="sabrina-initialized", description="Set once onboarding has started"
    )


class PersonalKeywords(BaseModel):
    """Keyword observables holding personal data collected during onboarding."""

    birthday: str = Field(default="DateOfBirth")
    gender: str = Field(default="Gender")


class CompanionAppConfig(BaseModel):
    """Data-collection app offered during onboarding."""

    app_id: str = Field(default="app-PopulateDatabase")
    description: str = Field(
        default="Fills the assistant database with data from your IoT devices"
    )
    code: str = Field(
        default=(
            "PopulateDatabase() {"
            "extern Weight : (Date, Measure(kg));"
            "extern Height : (Date, Measure(kg));"
            "extern Gender : (String);"
            "extern DateOfBirth : (Date);"
            '@(type="scale").source(t, w) => Weight(t, w);'
            "}"
        ),
        description="Program source handed to the app loader",
    )


class SettingsConfig(BaseModel):
    """Global settings configuration."""

    assistant_name: str = Field(default="Sabrina", description="Name the assistant introduces")
    log_level: LogLevel = Field(default="INFO")
    log_file: str | None = Field(default=None, description="JSON log file (rotated)")
    preference_keys: PreferenceKeys = Field(default_factory=PreferenceKeys)
    personal_keywords: PersonalKeywords = Field(default_factory=PersonalKeywords)
    companion_app: CompanionAppConfig = Field(default_factory=CompanionAppConfig)
