"""
Data contracts for Steam manifests and search results.

Pydantic models describing what is read from an app manifest
and what is handed back to the shell for each result.
"""

from typing import Any

from dbus_fast import Variant
from pydantic import BaseModel, ConfigDict, Field, field_validator


class AppManifest(BaseModel):
    """
    The AppState block of a steamapps/appmanifest_<appid>.acf file.

    Only the fields the search index needs are declared,
    the rest of the manifest is ignored.
    """

    model_config = ConfigDict(extra="ignore")

    appid: int = Field(..., ge=0, description="Steam app ID")
    name: str | None = Field(default=None, description="Display name")

    @field_validator("name")
    @classmethod
    def empty_name_is_missing(cls, v: str | None) -> str | None:
        """Treat a blank name the same as no name."""
        if v is not None and not v.strip():
            return None
        return v

    @property
    def identifier(self) -> str:
        """App ID in the string form used for search results."""
        return str(self.appid)


class ResultMeta(BaseModel):
    """
    Display metadata for one search result.

    Serialised as an a{sv} dictionary in GetResultMetas replies.
    """

    id: str
    name: str
    description: str
    icon_ref: str

    def to_dbus(self) -> dict[str, Any]:
        """Convert to the dictionary shape org.gnome.Shell.SearchProvider2 expects."""
        return {
            "id": Variant("s", self.id),
            "name": Variant("s", self.name),
            "description": Variant("s", self.description),
            "gicon": Variant("s", self.icon_ref),
        }
