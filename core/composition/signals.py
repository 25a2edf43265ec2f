"""
Signal resolution.

A signal is one optional, environment-supplied string (a credential, URL,
secret or flag). Signals are read once from the settings layer, blank
values are normalized to "absent", and the result is cached for the
lifetime of the process. Resolution never fails.
"""

from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import MappingProxyType
from typing import Mapping, Optional

from core.config import Settings, get_settings


class SignalName(str, Enum):
    """Every environment signal the composer understands."""
    DATABASE_URL = "DATABASE_URL"
    REDIS_URL = "REDIS_URL"
    WORKER_MODE = "MEDUSA_WORKER_MODE"
    BACKEND_URL = "BACKEND_PUBLIC_URL"
    DISABLE_ADMIN = "MEDUSA_DISABLE_ADMIN"
    ADMIN_CORS = "ADMIN_CORS"
    AUTH_CORS = "AUTH_CORS"
    STORE_CORS = "STORE_CORS"
    JWT_SECRET = "JWT_SECRET"
    COOKIE_SECRET = "COOKIE_SECRET"
    MINIO_ENDPOINT = "MINIO_ENDPOINT"
    MINIO_ACCESS_KEY = "MINIO_ACCESS_KEY"
    MINIO_SECRET_KEY = "MINIO_SECRET_KEY"
    MINIO_BUCKET = "MINIO_BUCKET"
    SENDGRID_API_KEY = "SENDGRID_API_KEY"
    SENDGRID_FROM_EMAIL = "SENDGRID_FROM_EMAIL"
    RESEND_API_KEY = "RESEND_API_KEY"
    RESEND_FROM_EMAIL = "RESEND_FROM_EMAIL"
    STRIPE_API_KEY = "STRIPE_API_KEY"
    STRIPE_WEBHOOK_SECRET = "STRIPE_WEBHOOK_SECRET"
    MEILISEARCH_HOST = "MEILISEARCH_HOST"
    MEILISEARCH_ADMIN_KEY = "MEILISEARCH_ADMIN_KEY"

    @property
    def settings_field(self) -> str:
        """Name of the matching attribute on Settings."""
        return self.value.lower()


@dataclass(frozen=True)
class Signal:
    """A named optional value. `value` is None or a non-empty string."""
    name: SignalName
    value: Optional[str] = None

    @property
    def present(self) -> bool:
        return self.value is not None


def _normalize(raw: object) -> Optional[str]:
    # Blank means absent. Present values are kept byte for byte.
    if raw is None:
        return None
    text = str(raw)
    return text if text.strip() else None


@dataclass(frozen=True)
class SignalSet:
    """
    Immutable snapshot of every recognized signal.

    Build it with `from_settings` or `from_mapping`; both cover the
    complete SignalName enumeration, so `resolve` is total.
    """
    signals: Mapping[SignalName, Signal]

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "SignalSet":
        """
        Build a set from a plain mapping keyed by environment name.

        Unknown keys are ignored; missing keys resolve to absent.
        """
        resolved = {
            name: Signal(name, _normalize(values.get(name.value)))
            for name in SignalName
        }
        return cls(MappingProxyType(resolved))

    @classmethod
    def from_settings(cls, settings: Settings) -> "SignalSet":
        return cls.from_mapping(
            {name.value: getattr(settings, name.settings_field) for name in SignalName}
        )

    def resolve(self, name: SignalName) -> Signal:
        return self.signals[name]

    def value(self, name: SignalName) -> Optional[str]:
        return self.signals[name].value

    def present(self, *names: SignalName) -> bool:
        """True when every given signal is present."""
        return all(self.signals[name].present for name in names)

    def present_names(self) -> list[str]:
        """Names (never values) of the signals that are set."""
        return [name.value for name, signal in self.signals.items() if signal.present]


@lru_cache
def resolve_signals() -> SignalSet:
    """
    Process-wide signal snapshot.

    Read once from the cached settings; subsequent calls return the
    same immutable object.
    """
    return SignalSet.from_settings(get_settings())


def resolve(name: SignalName) -> Signal:
    """Resolve a single signal from the process-wide snapshot."""
    return resolve_signals().resolve(name)


def reset_signals() -> None:
    """Drop cached settings and signals (used by tests and reloads)."""
    resolve_signals.cache_clear()
    get_settings.cache_clear()
