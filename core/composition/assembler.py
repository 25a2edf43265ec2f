"""
Module assembly.

Merges the always-present core settings (database, queue, HTTP policy,
auth secrets, admin) with the conditionally composed modules and plugins
into one frozen ConfigurationDescriptor.

Missing required core fields are handled according to the boot mode:
- strict: MissingRequiredSettingError listing every missing field
- permissive: the field becomes an empty string and a warning is logged
"""

from typing import Iterable, Optional

from core.composition.descriptors import (
    AdminConfig,
    ConfigurationDescriptor,
    HttpConfig,
    ModuleEntry,
    PluginEntry,
    ProjectConfig,
    SubsystemKey,
)
from core.composition.providers import (
    backend_url,
    compose_activation,
    require_url,
)
from core.composition.signals import SignalName, SignalSet
from core.config import BootMode
from core.errors import CompositionError, MalformedSignalError, MissingRequiredSettingError
from core.logging import get_logger


logger = get_logger(__name__)


REQUIRED_CORE_SIGNALS: tuple[SignalName, ...] = (
    SignalName.DATABASE_URL,
    SignalName.ADMIN_CORS,
    SignalName.AUTH_CORS,
    SignalName.STORE_CORS,
    SignalName.JWT_SECRET,
    SignalName.COOKIE_SECRET,
)

WORKER_MODES = ("shared", "worker", "server")
DEFAULT_WORKER_MODE = "server"

_TRUE_FLAGS = ("true", "1", "yes")
_FALSE_FLAGS = ("false", "0", "no")

# Module implementations per subsystem key
MODULE_RESOLVERS: dict[SubsystemKey, str] = {
    SubsystemKey.FILE: "@medusajs/file",
    SubsystemKey.EVENT_BUS: "@medusajs/event-bus-redis",
    SubsystemKey.WORKFLOW_ENGINE: "@medusajs/workflow-engine-redis",
    SubsystemKey.NOTIFICATION: "@medusajs/notification",
    SubsystemKey.PAYMENT: "@medusajs/payment",
}

MEILISEARCH_PRODUCT_SETTINGS = {
    "products": {
        "type": "products",
        "enabled": True,
        "fields": ["id", "title", "description", "handle", "variant_sku", "thumbnail"],
        "indexSettings": {
            "searchableAttributes": ["title", "description", "variant_sku"],
            "displayedAttributes": [
                "id", "handle", "title", "description", "variant_sku", "thumbnail",
            ],
            "filterableAttributes": ["id", "handle"],
        },
        "primaryKey": "id",
    }
}


# =========================================
# Core settings
# =========================================

def _required(signals: SignalSet, boot_mode: BootMode) -> dict[SignalName, str]:
    missing = [name for name in REQUIRED_CORE_SIGNALS if not signals.present(name)]
    if missing and boot_mode == "strict":
        raise MissingRequiredSettingError(name.value for name in missing)
    for name in missing:
        logger.warning(
            "Required setting missing, defaulting to empty string",
            setting=name.value,
            boot_mode=boot_mode,
        )
    return {name: signals.value(name) or "" for name in REQUIRED_CORE_SIGNALS}


def _worker_mode(signals: SignalSet) -> str:
    value = signals.value(SignalName.WORKER_MODE)
    if value is None:
        return DEFAULT_WORKER_MODE
    value = value.strip()
    if value not in WORKER_MODES:
        raise MalformedSignalError(
            SignalName.WORKER_MODE.value, f"expected one of {', '.join(WORKER_MODES)}"
        )
    return value


def parse_flag(signals: SignalSet, name: SignalName) -> bool:
    """Parse a boolean flag signal; absent means False."""
    value = signals.value(name)
    if value is None:
        return False
    lowered = value.strip().lower()
    if lowered in _TRUE_FLAGS:
        return True
    if lowered in _FALSE_FLAGS:
        return False
    raise MalformedSignalError(name.value, "expected true or false")


def build_project_config(signals: SignalSet, boot_mode: BootMode = "strict") -> ProjectConfig:
    required = _required(signals, boot_mode)
    redis_url = ""
    if signals.present(SignalName.REDIS_URL):
        redis_url = require_url(signals, SignalName.REDIS_URL, ("redis", "rediss"))

    return ProjectConfig(
        database_url=required[SignalName.DATABASE_URL],
        database_logging=False,
        redis_url=redis_url,
        worker_mode=_worker_mode(signals),
        http=HttpConfig(
            admin_cors=required[SignalName.ADMIN_CORS],
            auth_cors=required[SignalName.AUTH_CORS],
            store_cors=required[SignalName.STORE_CORS],
            jwt_secret=required[SignalName.JWT_SECRET],
            cookie_secret=required[SignalName.COOKIE_SECRET],
        ),
    )


def build_admin_config(signals: SignalSet) -> AdminConfig:
    return AdminConfig(
        backend_url=backend_url(signals),
        disable=parse_flag(signals, SignalName.DISABLE_ADMIN),
    )


# =========================================
# Modules and plugins
# =========================================

def build_modules(signals: SignalSet) -> tuple[ModuleEntry, ...]:
    """Compose every module entry in runtime boot order."""
    modules: list[ModuleEntry] = []

    storage = compose_activation(SubsystemKey.FILE, signals)
    modules.append(
        ModuleEntry(
            key=SubsystemKey.FILE,
            resolve=MODULE_RESOLVERS[SubsystemKey.FILE],
            providers=storage.providers,
        )
    )

    # Event bus and workflow engine share the queue predicate
    event_bus = compose_activation(SubsystemKey.EVENT_BUS, signals)
    workflows = compose_activation(SubsystemKey.WORKFLOW_ENGINE, signals)
    if event_bus.active and workflows.active:
        redis_url = signals.value(SignalName.REDIS_URL)
        modules.append(
            ModuleEntry(
                key=SubsystemKey.EVENT_BUS,
                resolve=MODULE_RESOLVERS[SubsystemKey.EVENT_BUS],
                options={"redisUrl": redis_url},
            )
        )
        modules.append(
            ModuleEntry(
                key=SubsystemKey.WORKFLOW_ENGINE,
                resolve=MODULE_RESOLVERS[SubsystemKey.WORKFLOW_ENGINE],
                options={"redis": {"url": redis_url}},
            )
        )

    for subsystem in (SubsystemKey.NOTIFICATION, SubsystemKey.PAYMENT):
        composition = compose_activation(subsystem, signals)
        if composition.active:
            modules.append(
                ModuleEntry(
                    key=subsystem,
                    resolve=MODULE_RESOLVERS[subsystem],
                    providers=composition.providers,
                )
            )

    return tuple(modules)


def build_plugins(signals: SignalSet) -> tuple[PluginEntry, ...]:
    search = compose_activation(SubsystemKey.SEARCH, signals)
    plugins = []
    for provider in search.providers:
        plugins.append(
            PluginEntry(
                resolve=provider.resolve,
                options={
                    "config": provider.options,
                    "settings": MEILISEARCH_PRODUCT_SETTINGS,
                },
            )
        )
    return tuple(plugins)


# =========================================
# Assembly
# =========================================

def _check_structure(modules: Iterable[ModuleEntry]) -> None:
    modules = list(modules)
    keys = [entry.key for entry in modules]

    if len(set(keys)) != len(keys):
        raise CompositionError(f"Duplicate module keys: {[key.value for key in keys]}")

    storage: Optional[ModuleEntry] = next(
        (entry for entry in modules if entry.key == SubsystemKey.FILE), None
    )
    if storage is None or len(storage.providers) != 1:
        raise CompositionError("File storage must have exactly one provider")

    if (SubsystemKey.EVENT_BUS in keys) != (SubsystemKey.WORKFLOW_ENGINE in keys):
        raise CompositionError("Event bus and workflow engine must be configured together")

    for entry in modules:
        ids = entry.provider_ids
        if len(set(ids)) != len(ids):
            raise CompositionError(
                f"Duplicate provider ids in {entry.key.value} module: {ids}"
            )
        if any(provider.subsystem_key != entry.key for provider in entry.providers):
            raise CompositionError(
                f"Provider bound to another subsystem in {entry.key.value} module"
            )


def assemble(
    project_config: ProjectConfig,
    admin: AdminConfig,
    modules: Iterable[ModuleEntry],
    plugins: Iterable[PluginEntry] = (),
) -> ConfigurationDescriptor:
    """
    Merge core settings with composed modules into the final descriptor.

    Module and plugin order is preserved as given.

    Raises:
        CompositionError: the module graph violates a structural invariant
    """
    modules = tuple(modules)
    _check_structure(modules)

    descriptor = ConfigurationDescriptor(
        project_config=project_config,
        admin=admin,
        modules=modules,
        plugins=tuple(plugins),
    )
    logger.info(
        "Configuration assembled",
        modules=descriptor.module_keys,
        plugins=[plugin.resolve for plugin in descriptor.plugins],
        admin_disabled=admin.disable,
    )
    return descriptor


def assemble_from_signals(
    signals: SignalSet, boot_mode: BootMode = "strict"
) -> ConfigurationDescriptor:
    """Run core settings, modules and plugins through `assemble`."""
    return assemble(
        build_project_config(signals, boot_mode),
        build_admin_config(signals),
        build_modules(signals),
        build_plugins(signals),
    )
