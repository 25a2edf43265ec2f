"""
Startup composition.

Runs the full pipeline once, synchronously, before any request is served:
resolve signals, compose and assemble modules, emit the descriptor.
Any ConfigurationError raised here is fatal and aborts the boot.
"""

from typing import Optional

from core.composition.assembler import assemble_from_signals
from core.composition.descriptors import ConfigurationDescriptor
from core.composition.emitter import emit
from core.composition.predicates import evaluate_all
from core.composition.signals import SignalSet, resolve_signals
from core.config import Settings, get_settings
from core.errors import ConfigurationError
from core.logging import get_logger


logger = get_logger(__name__)


def build_configuration(
    settings: Optional[Settings] = None,
    signals: Optional[SignalSet] = None,
) -> ConfigurationDescriptor:
    """
    Build the configuration descriptor for this process.

    Args:
        settings: Settings to use; defaults to the cached process settings
        signals: Pre-resolved signals; defaults to signals read from
            `settings` (or the cached process snapshot)

    Raises:
        ConfigurationError: composition failed; the service must not start
    """
    if settings is None:
        settings = get_settings()
        signals = signals or resolve_signals()
    elif signals is None:
        signals = SignalSet.from_settings(settings)

    boot_mode = settings.effective_boot_mode
    logger.info(
        "Composing backend configuration",
        environment=settings.environment,
        boot_mode=boot_mode,
        signals=signals.present_names(),
        predicates=evaluate_all(signals),
    )

    try:
        descriptor = assemble_from_signals(signals, boot_mode)
    except ConfigurationError as exc:
        logger.error("Configuration composition failed", error=str(exc))
        raise

    return emit(descriptor, log_config=settings.log_config_on_boot)
