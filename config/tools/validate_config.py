# config/tools/validate_config.py

import sys           # for exit codes
from dataclasses import asdict
from pprint import pprint  # for structured printing

# make src discoverable if running as a script
from pathlib import Path

import yaml

# __file__ is .../config/tools/validate_config.py
# parents[2] is the project root; append ROOT/src
PROJECT_ROOT = Path(__file__).resolve().parents[2]
sys.path.append(str(PROJECT_ROOT / "src"))

from env.loader import load_config, resolve_config_path  # import our loader


def main() -> None:
    """Load and print the resolved turtle config, failing fast on errors."""
    path = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    try:
        config = load_config(path)           # resolve the active profile
    except (OSError, KeyError, ValueError, yaml.YAMLError) as e:
        print("Config validation FAILED:", file=sys.stderr)
        print(repr(e), file=sys.stderr)
        sys.exit(1)                          # non-zero exit: CI will mark as failed

    print("Config validation OK:", resolve_config_path(path))
    print("\nActive profile:", config.name)
    for section in ("movement", "fuel", "inventory", "positioning", "planner", "persistence"):
        print(f"\n{section}:")
        pprint(asdict(getattr(config, section)))
    print("\nProtected blocks:")
    pprint(config.protected_blocks)


if __name__ == "__main__":
    main()  # run main() only when script is executed directly
