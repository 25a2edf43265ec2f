"""
Tests for feature predicates.
"""

from itertools import combinations

import pytest

from core.composition.predicates import (
    PREDICATES,
    PredicateId,
    evaluate,
    evaluate_all,
)
from core.composition.signals import SignalSet


@pytest.mark.parametrize("predicate", list(PredicateId))
def test_predicate_is_a_conjunction(predicate):
    """True only for the full set of required signals, for every subset."""
    required = [name.value for name in PREDICATES[predicate]]

    for size in range(len(required) + 1):
        for subset in combinations(required, size):
            signals = SignalSet.from_mapping({name: "value" for name in subset})
            assert evaluate(predicate, signals) is (size == len(required))


def test_storage_primary_needs_all_credentials():
    signals = SignalSet.from_mapping({
        "MINIO_ENDPOINT": "minio:9000",
        "MINIO_ACCESS_KEY": "access",
        "MINIO_SECRET_KEY": "",
    })

    assert evaluate(PredicateId.STORAGE_PRIMARY, signals) is False


def test_bucket_does_not_gate_storage():
    signals = SignalSet.from_mapping({
        "MINIO_ENDPOINT": "minio:9000",
        "MINIO_ACCESS_KEY": "access",
        "MINIO_SECRET_KEY": "secret",
    })

    assert evaluate(PredicateId.STORAGE_PRIMARY, signals) is True


def test_evaluate_accepts_string_ids():
    signals = SignalSet.from_mapping({"REDIS_URL": "redis://localhost:6379"})

    assert evaluate("queue_reachable", signals) is True


def test_evaluate_all_covers_every_predicate():
    result = evaluate_all(SignalSet.from_mapping({}))

    assert set(result) == {predicate.value for predicate in PredicateId}
    assert not any(result.values())
