"""Input validation for CLI arguments."""
import re
import sys

# SSM parameter names: letters, numbers and . - _ / only
_SSM_PATH_PATTERN = r'^/[a-zA-Z0-9_.\-/]*$'


def validate_ssm_path(path: str) -> None:
    """
    Validate a namespace prefix override against SSM parameter naming rules.

    Args:
        path: Prefix to validate

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not path:
        print("Error: SSM path cannot be empty", file=sys.stderr)
        sys.exit(2)

    if not re.match(_SSM_PATH_PATTERN, path) or "//" in path:
        print(f"Error: Invalid SSM path '{path}'", file=sys.stderr)
        print("\nPaths must start with '/' and contain only letters, numbers, '.', '-', '_' and '/'", file=sys.stderr)
        print("\nExamples of valid paths:", file=sys.stderr)
        print("  ✓ /my-service-dev/secrets/", file=sys.stderr)
        print("  ✓ /shared/api.keys", file=sys.stderr)
        print("\nExamples of invalid paths:", file=sys.stderr)
        print("  ✗ my-service/secrets (no leading slash)", file=sys.stderr)
        print("  ✗ /my service/ (contains space)", file=sys.stderr)
        sys.exit(2)


def validate_stage(stage: str) -> None:
    """
    Validate a stage name is usable inside a parameter path.

    Raises:
        SystemExit with code 2 if validation fails
    """
    if not re.match(r'^[a-zA-Z0-9_.\-]+$', stage):
        print(f"Error: Invalid stage '{stage}'", file=sys.stderr)
        print("\nAllowed characters: letters, numbers, '.', '-', '_'", file=sys.stderr)
        sys.exit(2)
