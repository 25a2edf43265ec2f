"""
Configuration emitter.

Hands the assembled descriptor to the host unchanged and, optionally,
logs a diagnostic dump of it. The dump is always redacted: values under
credential-like keys are masked and passwords embedded in connection
URLs are replaced.
"""

import json
import re
from collections.abc import Mapping
from typing import Any, Optional
from urllib.parse import urlsplit, urlunsplit

from core.composition.descriptors import ConfigurationDescriptor
from core.logging import get_logger


logger = get_logger(__name__)


MASK = "********"

SECRET_KEY_PATTERN = re.compile(
    r"(secret|password|passwd|token|credential|api_?key|access_?key|admin_?key|private_?key)",
    re.IGNORECASE,
)


def _scrub_url(value: str) -> str:
    if "://" not in value:
        return value
    try:
        parts = urlsplit(value)
        password = parts.password
    except ValueError:
        return value
    if not password:
        return value
    netloc = parts.netloc.replace(f":{password}@", f":{MASK}@", 1)
    return urlunsplit(parts._replace(netloc=netloc))


def redact(value: Any, key: Optional[str] = None) -> Any:
    """Return a copy of `value` with secrets masked."""
    if key is not None and SECRET_KEY_PATTERN.search(key) and value not in (None, ""):
        return MASK
    if isinstance(value, Mapping):
        return {k: redact(v, str(k)) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    if isinstance(value, str):
        return _scrub_url(value)
    return value


def to_json(descriptor: ConfigurationDescriptor, redacted: bool = True, indent: int = 2) -> str:
    """
    Deterministic JSON rendering of the descriptor.

    Identical descriptors always render to identical strings.
    """
    data = descriptor.to_dict()
    if redacted:
        data = redact(data)
    return json.dumps(data, indent=indent, ensure_ascii=False)


def emit(descriptor: ConfigurationDescriptor, log_config: bool = True) -> ConfigurationDescriptor:
    """
    Return the descriptor unchanged, logging a redacted dump if requested.
    """
    if log_config:
        logger.info("Configuration emitted", config=redact(descriptor.to_dict()))
    return descriptor
