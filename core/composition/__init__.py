"""
Environment-driven module composition.

Pipeline (one direction only):
    signals -> predicates -> providers -> assembler -> emitter

Decides, at startup, which optional subsystems (file storage, event bus,
workflow engine, notifications, payment, search) are wired into the
commerce runtime, purely from which credentials are present.
"""

from core.composition.assembler import assemble, assemble_from_signals
from core.composition.descriptors import (
    ConfigurationDescriptor,
    ModuleEntry,
    PluginEntry,
    ProviderDescriptor,
    SubsystemKey,
)
from core.composition.emitter import emit, redact, to_json
from core.composition.predicates import PredicateId, evaluate
from core.composition.providers import Activation, Composition, compose, compose_activation
from core.composition.signals import (
    Signal,
    SignalName,
    SignalSet,
    reset_signals,
    resolve,
    resolve_signals,
)

__all__ = [
    # Signals
    "Signal",
    "SignalName",
    "SignalSet",
    "resolve",
    "resolve_signals",
    "reset_signals",
    # Predicates
    "PredicateId",
    "evaluate",
    # Providers
    "Activation",
    "Composition",
    "compose",
    "compose_activation",
    # Descriptors
    "ConfigurationDescriptor",
    "ModuleEntry",
    "PluginEntry",
    "ProviderDescriptor",
    "SubsystemKey",
    # Assembly and emission
    "assemble",
    "assemble_from_signals",
    "emit",
    "redact",
    "to_json",
]
