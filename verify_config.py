#!/usr/bin/env python3
"""Check that config.example.yaml and the sample seed file still validate."""

import sys
from pathlib import Path

from autosearch.config.exceptions import ConfigurationError
from autosearch.config.loader import validate_config_file
from autosearch.pipeline.importer import load_seed_file

CONFIG_FILE = Path("config.example.yaml")
SEED_FILE = Path("tests/fixtures/seed.yaml")


def verify_seed_file(seed_file: Path) -> bool:
    """Validate a seed file and print a short summary."""
    try:
        data = load_seed_file(seed_file)
    except ConfigurationError as e:
        print(f"✗ Seed file validation failed:\n{e}")
        return False

    print(f"✓ Seed file {seed_file} is valid")
    print(f"  - {len(data.candidates)} candidates")
    print(f"  - {len(data.preferences)} preference sets")
    print(f"  - {len(data.jobs)} jobs")
    return True


if __name__ == "__main__":
    config_ok = validate_config_file(CONFIG_FILE)
    seed_ok = verify_seed_file(SEED_FILE)
    sys.exit(0 if config_ok and seed_ok else 1)
