"""
Tests for signal resolution.
"""

import pytest

from core.composition.signals import (
    Signal,
    SignalName,
    SignalSet,
    resolve,
    resolve_signals,
)


def test_missing_signals_resolve_to_absent():
    """Every recognized name resolves, even from an empty mapping."""
    signals = SignalSet.from_mapping({})

    for name in SignalName:
        signal = signals.resolve(name)
        assert signal == Signal(name, None)
        assert not signal.present


@pytest.mark.parametrize("raw", ["", "   ", "\t\n"])
def test_blank_values_are_absent(raw):
    signals = SignalSet.from_mapping({"REDIS_URL": raw})

    assert signals.value(SignalName.REDIS_URL) is None


def test_present_values_keep_surrounding_whitespace():
    signals = SignalSet.from_mapping({"JWT_SECRET": "  s3cret \n"})

    assert signals.value(SignalName.JWT_SECRET) == "  s3cret \n"
    assert signals.present(SignalName.JWT_SECRET)


def test_unknown_keys_are_ignored():
    signals = SignalSet.from_mapping({"NOT_A_SIGNAL": "value"})

    assert len(signals.signals) == len(SignalName)


def test_present_requires_every_name():
    signals = SignalSet.from_mapping({"MINIO_ENDPOINT": "minio:9000", "MINIO_ACCESS_KEY": "a"})

    assert signals.present(SignalName.MINIO_ENDPOINT, SignalName.MINIO_ACCESS_KEY)
    assert not signals.present(SignalName.MINIO_ENDPOINT, SignalName.MINIO_SECRET_KEY)


def test_present_names_never_expose_values():
    signals = SignalSet.from_mapping({"STRIPE_API_KEY": "sk_test_123"})

    assert signals.present_names() == ["STRIPE_API_KEY"]


def test_signal_set_is_read_only():
    signals = SignalSet.from_mapping({})

    with pytest.raises(TypeError):
        signals.signals[SignalName.REDIS_URL] = Signal(SignalName.REDIS_URL, "redis://x")


def test_from_settings_maps_every_field(make_settings):
    settings = make_settings(
        MEDUSA_WORKER_MODE="worker",
        BACKEND_PUBLIC_URL="https://api.shop.example.com",
        MEILISEARCH_HOST="",
    )

    signals = SignalSet.from_settings(settings)

    assert signals.value(SignalName.WORKER_MODE) == "worker"
    assert signals.value(SignalName.BACKEND_URL) == "https://api.shop.example.com"
    assert signals.value(SignalName.DATABASE_URL).startswith("postgres://")
    assert signals.value(SignalName.MEILISEARCH_HOST) is None


def test_process_signals_are_read_once(monkeypatch):
    monkeypatch.setenv("REDIS_URL", "redis://cache:6379")

    first = resolve_signals()
    monkeypatch.setenv("REDIS_URL", "redis://other:6379")
    second = resolve_signals()

    assert first is second
    assert resolve(SignalName.REDIS_URL).value == "redis://cache:6379"
