# Core package - foundational components
#
# Modules:
# - config: Application settings and environment signals
# - logging: Structured logging
# - errors: Configuration errors (fatal at boot)
# - composition: Signal -> predicate -> provider -> module pipeline
# - bootstrap: Builds the configuration descriptor at startup
