"""
Feature predicates.

Each predicate is a fixed conjunction of signals: the feature it gates is
active only when every listed signal is present. Predicates are pure and
total, so they can be evaluated for any combination of absent and present
signals without raising.
"""

from enum import Enum

from core.composition.signals import SignalName, SignalSet


class PredicateId(str, Enum):
    STORAGE_PRIMARY = "storage_primary"
    QUEUE_REACHABLE = "queue_reachable"
    NOTIFICATION_SENDGRID = "notification_sendgrid"
    NOTIFICATION_RESEND = "notification_resend"
    PAYMENT_STRIPE = "payment_stripe"
    SEARCH_MEILISEARCH = "search_meilisearch"


PREDICATES: dict[PredicateId, tuple[SignalName, ...]] = {
    PredicateId.STORAGE_PRIMARY: (
        SignalName.MINIO_ENDPOINT,
        SignalName.MINIO_ACCESS_KEY,
        SignalName.MINIO_SECRET_KEY,
    ),
    PredicateId.QUEUE_REACHABLE: (SignalName.REDIS_URL,),
    PredicateId.NOTIFICATION_SENDGRID: (
        SignalName.SENDGRID_API_KEY,
        SignalName.SENDGRID_FROM_EMAIL,
    ),
    PredicateId.NOTIFICATION_RESEND: (
        SignalName.RESEND_API_KEY,
        SignalName.RESEND_FROM_EMAIL,
    ),
    PredicateId.PAYMENT_STRIPE: (
        SignalName.STRIPE_API_KEY,
        SignalName.STRIPE_WEBHOOK_SECRET,
    ),
    PredicateId.SEARCH_MEILISEARCH: (
        SignalName.MEILISEARCH_HOST,
        SignalName.MEILISEARCH_ADMIN_KEY,
    ),
}


def required_signals(predicate_id: PredicateId) -> tuple[SignalName, ...]:
    return PREDICATES[PredicateId(predicate_id)]


def evaluate(predicate_id: PredicateId, signals: SignalSet) -> bool:
    """Return True when every signal required by the predicate is present."""
    return signals.present(*required_signals(predicate_id))


def evaluate_all(signals: SignalSet) -> dict[str, bool]:
    """Evaluate every declared predicate; handy for startup diagnostics."""
    return {predicate.value: evaluate(predicate, signals) for predicate in PredicateId}
