"""chainload CLI - command line interface for chainload."""

from chainload.cli.commands import cli
from chainload.cli.output import CLIOutput, OutputConfig, create_output


def main() -> None:
    """Main entry point for the chainload CLI."""
    cli()


__all__ = ["main", "cli", "CLIOutput", "OutputConfig", "create_output"]
