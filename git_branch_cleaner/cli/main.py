"""Command-line interface for git-branch-cleaner"""

import json
import os
import sys

from rich.console import Console

from git_branch_cleaner.agent import ToolRegistry
from git_branch_cleaner.cli.args import parse_args
from git_branch_cleaner.config import RunOptions, load_config
from git_branch_cleaner.core import BranchCleaner
from git_branch_cleaner.logging_config import get_logger, setup_logging
from git_branch_cleaner.services.git import GitOperations

console = Console()
logger = get_logger(__name__)


def resolve_repo_path(parsed_args) -> str:
    """--path wins over the positional path; the current directory is the default."""
    return os.path.abspath(parsed_args.path or parsed_args.repo_path or os.getcwd())


def main(argv=None) -> int:
    """Main entry point for the application."""
    debug = False
    try:
        parsed_args = parse_args(argv)
        debug = parsed_args.debug

        setup_logging(verbose=parsed_args.verbose, debug=parsed_args.debug)

        policy = load_config(parsed_args.config).with_overrides(
            exclude_patterns=parsed_args.exclude,
            stale_days=parsed_args.stale_days,
        )
        options = RunOptions(
            repo_path=resolve_repo_path(parsed_args),
            remote=parsed_args.remote,
            include_remote=not parsed_args.local_only,
            dry_run=parsed_args.dry_run,
            force=parsed_args.force,
            assume_yes=parsed_args.yes,
            verbose=parsed_args.verbose,
            debug=parsed_args.debug,
        )

        if parsed_args.list_tools:
            registry = ToolRegistry(GitOperations(options.repo_path, options.remote), policy)
            console.print_json(json.dumps(registry.schemas()))
            return 0

        if debug:
            console.print("[yellow]Configuration:[/yellow]")
            for key, value in policy.to_dict().items():
                console.print(f"  {key}: {value}")

        cleaner = BranchCleaner(options, policy)
        cleaner.run()

        console.print("\n[green]Branch cleanup session complete![/green]")
        return 0
    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        return 1
    except Exception as e:
        console.print(f"[red]Error: {e}[/red]")
        if debug:
            console.print_exception()
        return 1


if __name__ == "__main__":
    sys.exit(main())
