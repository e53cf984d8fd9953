"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field

from poolnav.constants.defaults import (
    NAVIGATION_MODE_DEFAULT,
    SHOW_DEFAULT_TEMPLATES_DEFAULT,
    SHOW_HIDDEN_OBJECTS_DEFAULT,
    SHOW_LOCAL_STORAGE_DEFAULT,
    SHOW_USER_TEMPLATES_DEFAULT,
    THEME_DEFAULT,
)


class NavigationSettings(BaseModel):
    """Tree visibility toggles consulted on every rebuild."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    show_default_templates: bool = SHOW_DEFAULT_TEMPLATES_DEFAULT
    show_user_templates: bool = SHOW_USER_TEMPLATES_DEFAULT
    show_local_storage: bool = SHOW_LOCAL_STORAGE_DEFAULT
    show_hidden_objects: bool = SHOW_HIDDEN_OBJECTS_DEFAULT


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True)

    # Paths
    inventory_path: str = ""

    # UI preferences
    theme: str = THEME_DEFAULT
    navigation_mode: str = NAVIGATION_MODE_DEFAULT

    # Tree visibility
    navigation: NavigationSettings = Field(default_factory=NavigationSettings)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when settings fail to load."""


class ConfigSaveError(ConfigError):
    """Raised when settings fail to save."""
