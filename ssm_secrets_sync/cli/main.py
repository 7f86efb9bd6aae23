"""CLI entrypoint for ssm-secrets-sync."""
import sys
import asyncio
import argparse
import logging

from ssm_secrets_sync import __version__
from .validators import validate_ssm_path, validate_stage

logger = logging.getLogger(__name__)


def _setup_logging(quiet: bool) -> None:
    logging.basicConfig(
        level=logging.WARNING if quiet else logging.INFO,
        format="%(message)s",
        stream=sys.stderr
    )


def _load(args):
    """Load configuration for a secrets command, applying CLI overrides."""
    from ssm_secrets_sync.secrets.domains.config_loader import load_config

    if args.stage:
        validate_stage(args.stage)
    if getattr(args, "ssm_path", None):
        validate_ssm_path(args.ssm_path)

    return load_config(
        config_path=args.config,
        stage=args.stage,
        region=args.region,
        ssm_path=getattr(args, "ssm_path", None),
    )


def _run(operation: str, config):
    from ssm_secrets_sync.secrets.domains.ssm_client import SSMParameterStore
    from ssm_secrets_sync.secrets.domains.stack_outputs import CloudFormationStackOutputs
    from ssm_secrets_sync.secrets.workflows.secret_operations import run_operation

    store = SSMParameterStore(region=config.region)
    stack_outputs = CloudFormationStackOutputs(region=config.region)
    return asyncio.run(run_operation(operation, config, store, stack_outputs))


def cmd_version(args):
    """Show version information."""
    print(f"ssm-secrets-sync {__version__}")


def cmd_secrets_deploy(args):
    """Upload changed secrets to SSM Parameter Store."""
    config = _load(args)
    outcomes = _run("deploy", config)

    updated = sum(1 for outcome in outcomes if outcome.status == "updated")
    print(f"Secrets deployed: {updated} updated, {len(outcomes) - updated} unchanged")


def cmd_secrets_remove(args):
    """Remove the secrets recorded by the deployed stack."""
    config = _load(args)
    report = _run("remove", config)

    if report.prefix is None:
        print("No deployed secrets found, nothing removed")
    else:
        print(f"Removed {report.removed} secrets from {report.prefix}")


def cmd_secrets_pull(args):
    """Download deployed secrets into the local secrets file."""
    config = _load(args)
    document = _run("pull", config)
    print(f"Pulled {len(document)} secrets into {config.file}")


SECRETS_COMMANDS = {
    "deploy": cmd_secrets_deploy,
    "remove": cmd_secrets_remove,
    "pull": cmd_secrets_pull,
}


def build_parser():
    """Build the argument parser with all commands registered."""
    parser = argparse.ArgumentParser(
        prog="secrets-sync",
        description="Sync a local secrets file with AWS SSM Parameter Store",
        epilog="""
Exit codes:
  0 - Success
  1 - Runtime error (AWS access, invalid secrets file, etc.)
  2 - Usage error (invalid arguments, missing configuration, etc.)

Environment variables:
  SECRETS_SYNC_CONFIG - Path to config file (overridden by --config)
  SECRETS_SYNC_DEBUG  - Set to '*' to log every raw SSM response

Configuration:
  Looked up in ./serverless.yml, then ./secrets-sync.yml
        """
    )
    parser.add_argument("--config", help="Path to config file")
    parser.add_argument("--stage", help="Stage name (overrides provider.stage)")
    parser.add_argument("--region", help="AWS region (overrides provider.region)")
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # version command
    _version_parser = subparsers.add_parser(
        "version",
        help="Show version information",
        description="Display the current version of ssm-secrets-sync"
    )

    # secrets command
    secrets_parser = subparsers.add_parser(
        "secrets",
        help="Upload secrets to SSM Parameter Store",
        description="Manage secrets in SSM Parameter Store"
    )
    secrets_parser.add_argument(
        "--ssm-path",
        help="Namespace prefix for secrets (default: /<service>-<stage>/secrets/)"
    )
    secrets_subparsers = secrets_parser.add_subparsers(dest="secrets_command")

    secrets_subparsers.add_parser(
        "deploy",
        help="Upload secrets",
        description="""
Upload every secret from the secrets file whose value differs from
the one stored in SSM. Unchanged secrets are not written.

A missing secrets file is skipped without error.
        """
    )
    secrets_subparsers.add_parser(
        "remove",
        help="Remove secrets",
        description="""
Delete all secrets under the prefix recorded by the deployed stack.
Does nothing when the stack recorded no prefix.
        """
    )
    secrets_subparsers.add_parser(
        "pull",
        help="Download secrets",
        description="Overwrite the secrets file with the secrets stored in SSM."
    )

    return parser, secrets_parser


def main(argv=None):
    """Main CLI entrypoint.

    Exit codes:
        0 - Success
        1 - Runtime errors (AWS access, invalid secrets file, etc.)
        2 - Usage errors (invalid arguments, missing configuration, etc.)
    """
    from ssm_secrets_sync.secrets.domains.errors import ConfigError

    parser, secrets_parser = build_parser()
    args = parser.parse_args(argv)

    # If no command provided, show help and exit with usage error code
    if not args.command:
        parser.print_help()
        sys.exit(2)

    _setup_logging(args.quiet)

    # Route to command handlers
    try:
        if args.command == "version":
            cmd_version(args)
        elif args.command == "secrets":
            handler = SECRETS_COMMANDS.get(args.secrets_command)
            if handler is None:
                secrets_parser.print_help()
                sys.exit(2)
            handler(args)
        else:
            parser.print_help()
            sys.exit(2)
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        sys.exit(1)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
