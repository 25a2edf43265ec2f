"""
Configuration descriptor models.

These frozen Pydantic models make up the artifact handed to the commerce
runtime at boot. Field names are snake_case in Python and serialize to the
camelCase keys the runtime expects (projectConfig, databaseUrl, ...).
"""

from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class SubsystemKey(str, Enum):
    """Module keys understood by the commerce runtime."""
    FILE = "file"
    EVENT_BUS = "event_bus"
    WORKFLOW_ENGINE = "workflows"
    NOTIFICATION = "notification"
    PAYMENT = "payment"
    SEARCH = "search"


def freeze(value: Any) -> Any:
    """Read-only copy of an options tree: mappings become proxies, lists become tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(item) for item in value)
    return value


def thaw(value: Any) -> Any:
    """Independent plain copy of a frozen options tree."""
    if isinstance(value, Mapping):
        return {key: thaw(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [thaw(item) for item in value]
    return value


class DescriptorModel(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class OptionsModel(DescriptorModel):
    """Descriptor part carrying an options mapping that cannot be edited in place."""

    options: Mapping[str, Any] = Field(default_factory=dict)

    @field_validator("options", mode="after")
    @classmethod
    def _freeze_options(cls, value: Mapping[str, Any]) -> Mapping[str, Any]:
        return freeze(value)


class ProviderDescriptor(OptionsModel):
    """One concrete backend bound to a subsystem."""

    subsystem_key: SubsystemKey = Field(exclude=True)
    id: str
    resolve: str

    def to_dict(self) -> dict[str, Any]:
        return {"resolve": self.resolve, "id": self.id, "options": thaw(self.options)}


class ModuleEntry(OptionsModel):
    """A subsystem module with its options and composed providers."""

    key: SubsystemKey
    resolve: str
    providers: tuple[ProviderDescriptor, ...] = ()

    @property
    def provider_ids(self) -> list[str]:
        return [provider.id for provider in self.providers]

    def to_dict(self) -> dict[str, Any]:
        options = thaw(self.options)
        if self.providers:
            options["providers"] = [provider.to_dict() for provider in self.providers]
        return {"key": self.key.value, "resolve": self.resolve, "options": options}


class PluginEntry(OptionsModel):
    resolve: str

    def to_dict(self) -> dict[str, Any]:
        return {"resolve": self.resolve, "options": thaw(self.options)}


class HttpConfig(DescriptorModel):
    admin_cors: str
    auth_cors: str
    store_cors: str
    jwt_secret: str
    cookie_secret: str


class ProjectConfig(DescriptorModel):
    database_url: str
    database_logging: bool = False
    redis_url: str = ""
    worker_mode: str = "server"
    http: HttpConfig


class AdminConfig(DescriptorModel):
    backend_url: str
    disable: bool = False


class ConfigurationDescriptor(DescriptorModel):
    """
    Root startup artifact.

    Built once by the module assembler and never mutated afterwards.
    """

    project_config: ProjectConfig
    admin: AdminConfig
    modules: tuple[ModuleEntry, ...] = ()
    plugins: tuple[PluginEntry, ...] = ()

    def module(self, key: SubsystemKey) -> Optional[ModuleEntry]:
        for entry in self.modules:
            if entry.key == key:
                return entry
        return None

    @property
    def module_keys(self) -> list[str]:
        return [entry.key.value for entry in self.modules]

    def to_dict(self) -> dict[str, Any]:
        """Plain dict in the shape the commerce runtime boots from."""
        return {
            "projectConfig": self.project_config.model_dump(by_alias=True),
            "admin": self.admin.model_dump(by_alias=True),
            "modules": [entry.to_dict() for entry in self.modules],
            "plugins": [plugin.to_dict() for plugin in self.plugins],
        }
