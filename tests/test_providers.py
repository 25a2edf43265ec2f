"""
Tests for provider composition.
"""

from itertools import product

import pytest

from core.composition.descriptors import SubsystemKey
from core.composition.providers import (
    DEFAULT_MINIO_BUCKET,
    Activation,
    compose,
    compose_activation,
)
from core.composition.signals import SignalSet
from core.errors import MalformedSignalError


# =========================================
# File storage
# =========================================

def test_storage_falls_back_to_local(make_signals):
    composition = compose_activation(SubsystemKey.FILE, make_signals())

    assert composition.activation == Activation.FALLBACK
    (provider,) = composition.providers
    assert provider.id == "local"
    assert provider.resolve == "@medusajs/file-local"
    assert provider.options == {
        "upload_dir": "static",
        "backend_url": "http://localhost:9000/static",
    }


def test_local_storage_uses_public_backend_url(make_signals):
    signals = make_signals(BACKEND_PUBLIC_URL="https://api.shop.example.com/")

    (provider,) = compose(SubsystemKey.FILE, signals)

    assert provider.options["backend_url"] == "https://api.shop.example.com/static"


def test_storage_primary_with_default_bucket(make_signals, minio_env):
    composition = compose_activation(SubsystemKey.FILE, make_signals(**minio_env))

    assert composition.activation == Activation.PRIMARY
    (provider,) = composition.providers
    assert provider.id == "minio"
    assert provider.options == {
        "endPoint": "minio.internal:9000",
        "accessKey": "minio-access",
        "secretKey": "minio-secret",
        "bucket": DEFAULT_MINIO_BUCKET,
    }


def test_storage_primary_with_custom_bucket(make_signals, minio_env):
    (provider,) = compose(SubsystemKey.FILE, make_signals(MINIO_BUCKET="shop-assets", **minio_env))

    assert provider.options["bucket"] == "shop-assets"


@pytest.mark.parametrize("endpoint", ["https://minio.example.com", "http://10.0.0.5:9000", "minio"])
def test_storage_endpoint_shapes_accepted(make_signals, minio_env, endpoint):
    minio_env["MINIO_ENDPOINT"] = endpoint

    (provider,) = compose(SubsystemKey.FILE, make_signals(**minio_env))

    assert provider.options["endPoint"] == endpoint


@pytest.mark.parametrize("endpoint", ["ftp://minio:21", "minio:port", "minio.example.com/path", "-minio"])
def test_malformed_endpoint_fails_fast(make_signals, minio_env, endpoint):
    minio_env["MINIO_ENDPOINT"] = endpoint

    with pytest.raises(MalformedSignalError) as exc_info:
        compose(SubsystemKey.FILE, make_signals(**minio_env))

    assert exc_info.value.signal == "MINIO_ENDPOINT"


@pytest.mark.parametrize("bucket", ["ab", "Shop_Assets", "shop..assets", "-shop", "x" * 64])
def test_malformed_bucket_fails_fast(make_signals, minio_env, bucket):
    with pytest.raises(MalformedSignalError) as exc_info:
        compose(SubsystemKey.FILE, make_signals(MINIO_BUCKET=bucket, **minio_env))

    assert exc_info.value.signal == "MINIO_BUCKET"


def test_malformed_value_is_not_in_error_message(make_signals):
    with pytest.raises(MalformedSignalError) as exc_info:
        compose(SubsystemKey.PAYMENT, make_signals(
            STRIPE_API_KEY="pk_live_leaky", STRIPE_WEBHOOK_SECRET="whsec_1",
        ))

    assert "pk_live_leaky" not in str(exc_info.value)


def test_storage_always_has_exactly_one_provider(minio_env):
    """Every combination of MinIO signals yields exactly one provider."""
    names = list(minio_env) + ["MINIO_BUCKET"]
    values = dict(minio_env, MINIO_BUCKET="media")

    for mask in product([False, True], repeat=len(names)):
        signals = SignalSet.from_mapping(
            {name: values[name] for name, on in zip(names, mask) if on}
        )
        providers = compose(SubsystemKey.FILE, signals)
        assert len(providers) == 1
        expected = "minio" if all(mask[:3]) else "local"
        assert providers[0].id == expected


def test_incomplete_minio_credentials_are_not_validated(make_signals):
    """The primary path is off, so a bad endpoint is never looked at."""
    (provider,) = compose(SubsystemKey.FILE, make_signals(MINIO_ENDPOINT="not a host"))

    assert provider.id == "local"


# =========================================
# Notifications
# =========================================

def test_no_notification_providers(make_signals):
    composition = compose_activation(SubsystemKey.NOTIFICATION, make_signals())

    assert composition.activation == Activation.ABSENT
    assert composition.providers == ()


def test_sendgrid_only(make_signals, notification_env):
    signals = make_signals(
        SENDGRID_API_KEY=notification_env["SENDGRID_API_KEY"],
        SENDGRID_FROM_EMAIL=notification_env["SENDGRID_FROM_EMAIL"],
    )

    composition = compose_activation(SubsystemKey.NOTIFICATION, signals)

    assert composition.activation == Activation.PRIMARY
    (provider,) = composition.providers
    assert provider.id == "sendgrid"
    assert provider.options == {
        "channels": ("email",),
        "api_key": "SG.sendgrid-key",
        "from": "orders@shop.example.com",
    }


def test_resend_only(make_signals, notification_env):
    signals = make_signals(
        RESEND_API_KEY=notification_env["RESEND_API_KEY"],
        RESEND_FROM_EMAIL=notification_env["RESEND_FROM_EMAIL"],
    )

    (provider,) = compose(SubsystemKey.NOTIFICATION, signals)

    assert provider.id == "resend"
    assert provider.resolve == "./src/modules/email-notifications"


def test_both_notification_providers_in_priority_order(make_signals, notification_env):
    composition = compose_activation(SubsystemKey.NOTIFICATION, make_signals(**notification_env))

    assert composition.activation == Activation.MULTIPLE
    assert [provider.id for provider in composition.providers] == ["sendgrid", "resend"]


def test_notification_providers_are_independent(make_signals, notification_env):
    """Enabling one provider never suppresses or duplicates the other."""
    sendgrid = {k: v for k, v in notification_env.items() if k.startswith("SENDGRID")}
    resend = {k: v for k, v in notification_env.items() if k.startswith("RESEND")}

    for sendgrid_on, resend_on in product([False, True], repeat=2):
        env = {**(sendgrid if sendgrid_on else {}), **(resend if resend_on else {})}
        ids = [provider.id for provider in compose(SubsystemKey.NOTIFICATION, make_signals(**env))]
        assert ids.count("sendgrid") == int(sendgrid_on)
        assert ids.count("resend") == int(resend_on)


def test_api_key_without_sender_is_inactive(make_signals):
    assert compose(SubsystemKey.NOTIFICATION, make_signals(RESEND_API_KEY="re_key")) == ()


@pytest.mark.parametrize(
    "sender",
    ["not-an-address", "orders@", "@shop.example.com", "orders@shop..example.com", "orders @shop.example.com"],
)
def test_malformed_sender_fails_fast(make_signals, sender):
    with pytest.raises(MalformedSignalError) as exc_info:
        compose(SubsystemKey.NOTIFICATION, make_signals(
            SENDGRID_API_KEY="SG.key", SENDGRID_FROM_EMAIL=sender,
        ))

    assert exc_info.value.signal == "SENDGRID_FROM_EMAIL"
    assert sender not in str(exc_info.value)


def test_sender_is_passed_through_unchanged(make_signals):
    (provider,) = compose(SubsystemKey.NOTIFICATION, make_signals(
        RESEND_API_KEY="re_key", RESEND_FROM_EMAIL="Orders@Shop.Example.com",
    ))

    assert provider.options["from"] == "Orders@Shop.Example.com"


# =========================================
# Payment, search, queue
# =========================================

def test_stripe_provider(make_signals):
    (provider,) = compose(SubsystemKey.PAYMENT, make_signals(
        STRIPE_API_KEY="sk_test_123", STRIPE_WEBHOOK_SECRET="whsec_abc",
    ))

    assert provider.id == "stripe"
    assert provider.resolve == "@medusajs/payment-stripe"
    assert provider.options == {"apiKey": "sk_test_123", "webhookSecret": "whsec_abc"}


def test_stripe_absent_without_webhook_secret(make_signals):
    composition = compose_activation(SubsystemKey.PAYMENT, make_signals(STRIPE_API_KEY="sk_test_1"))

    assert composition.activation == Activation.ABSENT


def test_malformed_webhook_secret_fails_fast(make_signals):
    with pytest.raises(MalformedSignalError) as exc_info:
        compose(SubsystemKey.PAYMENT, make_signals(
            STRIPE_API_KEY="rk_live_1", STRIPE_WEBHOOK_SECRET="secret",
        ))

    assert exc_info.value.signal == "STRIPE_WEBHOOK_SECRET"


def test_meilisearch_provider(make_signals):
    (provider,) = compose(SubsystemKey.SEARCH, make_signals(
        MEILISEARCH_HOST="https://search.shop.example.com", MEILISEARCH_ADMIN_KEY="admin-key",
    ))

    assert provider.options == {
        "host": "https://search.shop.example.com",
        "apiKey": "admin-key",
    }


def test_meilisearch_host_must_be_http_url(make_signals):
    with pytest.raises(MalformedSignalError):
        compose(SubsystemKey.SEARCH, make_signals(
            MEILISEARCH_HOST="search.shop.example.com", MEILISEARCH_ADMIN_KEY="admin-key",
        ))


@pytest.mark.parametrize("subsystem", [SubsystemKey.EVENT_BUS, SubsystemKey.WORKFLOW_ENGINE])
def test_queue_modules_follow_redis(make_signals, subsystem):
    assert compose_activation(subsystem, make_signals()).activation == Activation.ABSENT
    active = compose_activation(subsystem, make_signals(REDIS_URL="redis://cache:6379"))
    assert active.activation == Activation.PRIMARY
    assert active.providers == ()


def test_malformed_redis_url_fails_fast(make_signals):
    with pytest.raises(MalformedSignalError) as exc_info:
        compose(SubsystemKey.EVENT_BUS, make_signals(REDIS_URL="cache:6379"))

    assert exc_info.value.signal == "REDIS_URL"
