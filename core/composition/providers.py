"""
Provider composition.

For each optional subsystem this module decides which concrete providers
are wired in, based only on predicate results over the resolved signals:

- file storage is mandatory with a fallback: MinIO when its credentials
  are complete, local disk otherwise. Exactly one provider, always.
- notification channels are independent: SendGrid and Resend may each be
  enabled, in that fixed order.
- payment and search are single-or-none.
- event bus and workflow engine carry no providers; they share the queue
  predicate and are composed as a pair by the assembler.

When a predicate holds but one of the values it activates has the wrong
shape, composition fails fast with MalformedSignalError instead of
emitting a half-valid provider.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable
from urllib.parse import urlsplit

from pydantic import EmailStr, TypeAdapter, ValidationError

from core.composition.descriptors import ProviderDescriptor, SubsystemKey
from core.composition.predicates import PredicateId, evaluate
from core.composition.signals import SignalName, SignalSet
from core.errors import MalformedSignalError
from core.logging import get_logger


logger = get_logger(__name__)


DEFAULT_BACKEND_URL = "http://localhost:9000"
DEFAULT_MINIO_BUCKET = "medusa-media"
LOCAL_UPLOAD_DIR = "static"

_HOST_PORT_RE = re.compile(r"^[A-Za-z0-9]([A-Za-z0-9.-]*[A-Za-z0-9])?(:\d{1,5})?$")
_BUCKET_RE = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")
_EMAIL_ADAPTER = TypeAdapter(EmailStr)


class Activation(str, Enum):
    """How a subsystem was activated for a given signal set."""
    ABSENT = "absent"
    FALLBACK = "fallback"
    PRIMARY = "primary"
    MULTIPLE = "multiple"


@dataclass(frozen=True)
class Composition:
    """Tagged result of composing one subsystem."""
    subsystem: SubsystemKey
    activation: Activation
    providers: tuple[ProviderDescriptor, ...] = ()

    @property
    def active(self) -> bool:
        return self.activation != Activation.ABSENT


# =========================================
# Shape checks
# =========================================

def require_url(signals: SignalSet, name: SignalName, schemes: tuple[str, ...]) -> str:
    """Return the signal value if it is an absolute URL with one of `schemes`."""
    value = signals.value(name)
    if value is None:
        raise MalformedSignalError(name.value, "value is required")
    parts = urlsplit(value)
    if parts.scheme not in schemes or not parts.hostname:
        raise MalformedSignalError(
            name.value,
            f"expected an absolute URL with scheme {' or '.join(schemes)}",
        )
    return value


def _require_endpoint(signals: SignalSet) -> str:
    value = signals.value(SignalName.MINIO_ENDPOINT)
    host = re.sub(r"^https?://", "", value or "").rstrip("/")
    if not _HOST_PORT_RE.match(host):
        raise MalformedSignalError(
            SignalName.MINIO_ENDPOINT.value, "expected host[:port], optionally with http(s)://"
        )
    return value


def _bucket(signals: SignalSet) -> str:
    value = signals.value(SignalName.MINIO_BUCKET)
    if value is None:
        return DEFAULT_MINIO_BUCKET
    if not _BUCKET_RE.match(value) or ".." in value:
        raise MalformedSignalError(
            SignalName.MINIO_BUCKET.value,
            "bucket names are 3-63 lowercase letters, digits, dots or hyphens",
        )
    return value


def _require_email(signals: SignalSet, name: SignalName) -> str:
    value = signals.value(name)
    try:
        _EMAIL_ADAPTER.validate_python(value)
    except ValidationError:
        raise MalformedSignalError(name.value, "expected a sender address like shop@example.com") from None
    return value


def _require_prefix(signals: SignalSet, name: SignalName, prefixes: tuple[str, ...]) -> str:
    value = signals.value(name)
    if value is None or not value.startswith(prefixes):
        raise MalformedSignalError(
            name.value, f"expected a value starting with {' or '.join(prefixes)}"
        )
    return value


def backend_url(signals: SignalSet) -> str:
    """Public backend URL, defaulting to the local development server."""
    if not signals.present(SignalName.BACKEND_URL):
        return DEFAULT_BACKEND_URL
    return require_url(signals, SignalName.BACKEND_URL, ("http", "https")).rstrip("/")


# =========================================
# Provider builders
# =========================================

def _minio_provider(signals: SignalSet) -> ProviderDescriptor:
    return ProviderDescriptor(
        subsystem_key=SubsystemKey.FILE,
        id="minio",
        resolve="./src/modules/minio-file",
        options={
            "endPoint": _require_endpoint(signals),
            "accessKey": signals.value(SignalName.MINIO_ACCESS_KEY),
            "secretKey": signals.value(SignalName.MINIO_SECRET_KEY),
            "bucket": _bucket(signals),
        },
    )


def _local_file_provider(signals: SignalSet) -> ProviderDescriptor:
    return ProviderDescriptor(
        subsystem_key=SubsystemKey.FILE,
        id="local",
        resolve="@medusajs/file-local",
        options={
            "upload_dir": LOCAL_UPLOAD_DIR,
            "backend_url": f"{backend_url(signals)}/{LOCAL_UPLOAD_DIR}",
        },
    )


def _sendgrid_provider(signals: SignalSet) -> ProviderDescriptor:
    return ProviderDescriptor(
        subsystem_key=SubsystemKey.NOTIFICATION,
        id="sendgrid",
        resolve="@medusajs/notification-sendgrid",
        options={
            "channels": ["email"],
            "api_key": signals.value(SignalName.SENDGRID_API_KEY),
            "from": _require_email(signals, SignalName.SENDGRID_FROM_EMAIL),
        },
    )


def _resend_provider(signals: SignalSet) -> ProviderDescriptor:
    return ProviderDescriptor(
        subsystem_key=SubsystemKey.NOTIFICATION,
        id="resend",
        resolve="./src/modules/email-notifications",
        options={
            "channels": ["email"],
            "api_key": signals.value(SignalName.RESEND_API_KEY),
            "from": _require_email(signals, SignalName.RESEND_FROM_EMAIL),
        },
    )


def _stripe_provider(signals: SignalSet) -> ProviderDescriptor:
    return ProviderDescriptor(
        subsystem_key=SubsystemKey.PAYMENT,
        id="stripe",
        resolve="@medusajs/payment-stripe",
        options={
            "apiKey": _require_prefix(signals, SignalName.STRIPE_API_KEY, ("sk_", "rk_")),
            "webhookSecret": _require_prefix(
                signals, SignalName.STRIPE_WEBHOOK_SECRET, ("whsec_",)
            ),
        },
    )


def _meilisearch_provider(signals: SignalSet) -> ProviderDescriptor:
    return ProviderDescriptor(
        subsystem_key=SubsystemKey.SEARCH,
        id="meilisearch",
        resolve="@rokmohar/medusa-plugin-meilisearch",
        options={
            "host": require_url(signals, SignalName.MEILISEARCH_HOST, ("http", "https")),
            "apiKey": signals.value(SignalName.MEILISEARCH_ADMIN_KEY),
        },
    )


ProviderBuilder = Callable[[SignalSet], ProviderDescriptor]

# Declared priority order for independently optional providers
NOTIFICATION_PROVIDERS: tuple[tuple[PredicateId, ProviderBuilder], ...] = (
    (PredicateId.NOTIFICATION_SENDGRID, _sendgrid_provider),
    (PredicateId.NOTIFICATION_RESEND, _resend_provider),
)

SINGLE_PROVIDERS: dict[SubsystemKey, tuple[PredicateId, ProviderBuilder]] = {
    SubsystemKey.PAYMENT: (PredicateId.PAYMENT_STRIPE, _stripe_provider),
    SubsystemKey.SEARCH: (PredicateId.SEARCH_MEILISEARCH, _meilisearch_provider),
}


# =========================================
# Composer
# =========================================

def _compose_file(signals: SignalSet) -> Composition:
    # Primary is checked first; the fallback only runs when it is false.
    if evaluate(PredicateId.STORAGE_PRIMARY, signals):
        return Composition(SubsystemKey.FILE, Activation.PRIMARY, (_minio_provider(signals),))
    return Composition(SubsystemKey.FILE, Activation.FALLBACK, (_local_file_provider(signals),))


def _compose_notification(signals: SignalSet) -> Composition:
    providers = tuple(
        build(signals)
        for predicate, build in NOTIFICATION_PROVIDERS
        if evaluate(predicate, signals)
    )
    if not providers:
        return Composition(SubsystemKey.NOTIFICATION, Activation.ABSENT)
    activation = Activation.MULTIPLE if len(providers) > 1 else Activation.PRIMARY
    return Composition(SubsystemKey.NOTIFICATION, activation, providers)


def _compose_single(subsystem: SubsystemKey, signals: SignalSet) -> Composition:
    predicate, build = SINGLE_PROVIDERS[subsystem]
    if not evaluate(predicate, signals):
        return Composition(subsystem, Activation.ABSENT)
    return Composition(subsystem, Activation.PRIMARY, (build(signals),))


def _compose_queue(subsystem: SubsystemKey, signals: SignalSet) -> Composition:
    if not evaluate(PredicateId.QUEUE_REACHABLE, signals):
        return Composition(subsystem, Activation.ABSENT)
    require_url(signals, SignalName.REDIS_URL, ("redis", "rediss"))
    return Composition(subsystem, Activation.PRIMARY)


def compose_activation(subsystem: SubsystemKey, signals: SignalSet) -> Composition:
    """
    Compose one subsystem into a tagged Composition.

    Raises:
        MalformedSignalError: an activated value has the wrong shape
    """
    subsystem = SubsystemKey(subsystem)
    if subsystem == SubsystemKey.FILE:
        composition = _compose_file(signals)
    elif subsystem == SubsystemKey.NOTIFICATION:
        composition = _compose_notification(signals)
    elif subsystem in SINGLE_PROVIDERS:
        composition = _compose_single(subsystem, signals)
    else:
        composition = _compose_queue(subsystem, signals)

    logger.info(
        "Subsystem composed",
        subsystem=subsystem.value,
        activation=composition.activation.value,
        providers=[provider.id for provider in composition.providers],
    )
    return composition


def compose(subsystem: SubsystemKey, signals: SignalSet) -> tuple[ProviderDescriptor, ...]:
    """Providers for one subsystem, in declared order."""
    return compose_activation(subsystem, signals).providers

