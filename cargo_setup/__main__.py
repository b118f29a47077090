"""Allow ``python -m cargo_setup``."""

from cargo_setup.cli import run

run()
