"""
Configuration dump script.

Composes the backend configuration from the current environment (and
.env file) and prints it as JSON with secrets masked. Exits with status 1
if composition fails, which makes it usable as a pre-deploy check.

Usage:
    python -m scripts.show_config
    python -m scripts.show_config --boot-mode strict
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.bootstrap import build_configuration
from core.composition.emitter import to_json
from core.config import get_settings
from core.errors import ConfigurationError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print the composed backend configuration")
    parser.add_argument(
        "--boot-mode",
        choices=["strict", "permissive"],
        default=None,
        help="Override BOOT_MODE for this run",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    if args.boot_mode:
        settings = settings.model_copy(update={"boot_mode": args.boot_mode})
    # The dump below is the diagnostic output; skip the boot log copy
    settings = settings.model_copy(update={"log_config_on_boot": False})

    try:
        descriptor = build_configuration(settings)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    print(to_json(descriptor, redacted=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
