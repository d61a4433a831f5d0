"""Grablin command-line interface.

Subcommands:

    grablin init       Create grablin.json interactively
    grablin generate   Generate the project via the Grablin API
    grablin list       List available modules and extensions
    grablin validate   Validate grablin.json
    grablin whoami     Show the authenticated GitHub user

Usage::

    python -m grablin generate -o ./my-app
    grablin generate --push-to-github --repo my-app --private
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence

from rich.markup import escape

from grablin import __version__
from grablin.auth import PRIMARY_TOKEN_VAR, SECONDARY_TOKEN_VAR, TOKEN_URL, CredentialResolver
from grablin.client import (
    KIND_TITLES,
    GenerateOptions,
    Generator,
    ModuleCatalog,
    group_by_kind,
    kind_for_filter,
)
from grablin.config import Config
from grablin.prompts import confirm_overwrite, prompt_for_config
from grablin.schema import validate
from grablin.store import ConfigParseError, ConfigStore
from grablin.utils import (
    configure_logging,
    console,
    create_status,
    print_dim,
    print_error,
    print_info,
    print_json,
    print_kv,
    print_list,
    print_section,
    print_success,
    print_warning,
)


def _text(value: object) -> str:
    """Render a config or API value literally inside Rich markup."""
    return escape(str(value))


# ---------------------------------------------------------------------------
# init
# ---------------------------------------------------------------------------


def cmd_init(args: argparse.Namespace, config: Config) -> int:
    store = ConfigStore(default_file=config.config_file)
    config_path = store.resolve_path(args.config)

    if store.exists(config_path) and not (args.force or args.yes):
        if not confirm_overwrite(config_path):
            print_info("Cancelled")
            return 0

    print_section("Grablin Project Setup")
    description = prompt_for_config()
    saved_path = store.save(description, config_path)

    console.print()
    print_success(f"Created {_text(saved_path)}")
    console.print()
    print_info("Next steps:")
    print_list([
        f"Review and edit {_text(config_path)} as needed",
        "Run: grablin generate",
    ])
    return 0


# ---------------------------------------------------------------------------
# generate
# ---------------------------------------------------------------------------


def cmd_generate(args: argparse.Namespace, config: Config) -> int:
    if not args.output and not args.push_to_github:
        print_error("Must specify either --output <dir> or --push-to-github")
        return 1

    store = ConfigStore(default_file=config.config_file)
    config_path = store.resolve_path(args.config)

    project = store.load(config_path)
    if project is None:
        print_error(f"Config file not found: {_text(config_path)}")
        print_info('Run "grablin init" to create a configuration file')
        return 1
    if not args.quiet:
        print_success("Configuration loaded")

    result = validate(project)
    if result.warnings and not args.quiet:
        print_warning("Configuration has warnings:")
        for warning in result.warnings:
            print_warning(f"  {_text(warning)}")

    if not result.valid:
        print_error("Configuration is invalid:")
        for error in result.errors:
            print_error(f"  {_text(error)}")
        return 1

    if not result.warnings and not args.quiet:
        print_success("Configuration valid")

    api_url = args.api or config.normalized_api_url
    if not args.quiet:
        print_section("Generation Settings")
        print_kv("Project", _text(project.project_name or ""))
        print_kv("Domain", _text(project.domain or ""))
        print_kv("API", _text(api_url))
        if args.output:
            print_kv("Output", _text(args.output))
        if args.push_to_github:
            print_kv("GitHub", _text(args.repo or str(project.project_name or "").lower()))
            print_kv("Private", "Yes" if args.private else "No")
        console.print()

    generator = Generator(
        CredentialResolver(retry=config.identity, timeout=config.timeout),
        api_url=config.normalized_api_url,
        timeout=config.timeout,
    )
    options = GenerateOptions(
        config=project,
        api_url=api_url,
        output=args.output,
        push_to_github=args.push_to_github,
        repo_name=args.repo,
        private=args.private,
        verbose=args.verbose,
    )

    with create_status("Generating project via Grablin API"):
        outcome = asyncio.run(generator.generate(options))

    if not outcome.success:
        print_error("Generation failed")
        print_error(_text(outcome.error or "Unknown error"))
        return 1

    print_success("Project generated successfully")
    console.print()
    if outcome.repo_url:
        print_success(f"Repository created: {_text(outcome.repo_url)}")
        console.print()
        print_info("Clone your project:")
        print_dim(f"  {_text(outcome.clone_command or f'git clone {outcome.repo_url}')}")
    elif outcome.output_path:
        print_success(f"Project extracted to: {_text(outcome.output_path)}")
        console.print()
        print_info("Next steps:")
        print_list([
            f"cd {_text(outcome.output_path)}",
            "Review generated files",
            "Follow README.md for setup",
        ])
    return 0


# ---------------------------------------------------------------------------
# list
# ---------------------------------------------------------------------------


def cmd_list(args: argparse.Namespace, config: Config) -> int:
    catalog = ModuleCatalog(api_url=config.normalized_api_url, timeout=config.timeout)
    with create_status("Fetching available modules"):
        result = asyncio.run(catalog.list_modules(args.api))

    if not result.success:
        print_error("Failed to fetch modules")
        print_error(_text(result.error or "Unknown error"))
        return 1

    if args.json:
        print_json([entry.model_dump() for entry in result.modules])
        return 0

    entries = result.modules
    if args.type:
        kind = kind_for_filter(args.type)
        entries = [entry for entry in entries if entry.kind == kind]

    if not entries:
        print_warning(f"No {_text(args.type or 'modules')} found")
        return 0

    for kind, items in group_by_kind(entries).items():
        print_section(KIND_TITLES.get(kind, kind))
        for entry in items:
            console.print()
            console.print(
                f"  [bold]{_text(entry.id)}[/bold] [dim]({_text(entry.type)})[/dim]", highlight=False
            )
            console.print(f"    {_text(entry.description or 'No description')}", highlight=False)
            if entry.layers:
                console.print(f"    [dim]Layers:[/dim] {_text(', '.join(entry.layers))}", highlight=False)
    console.print()
    return 0


# ---------------------------------------------------------------------------
# validate
# ---------------------------------------------------------------------------


def cmd_validate(args: argparse.Namespace, config: Config) -> int:
    store = ConfigStore(default_file=config.config_file)
    config_path = store.resolve_path(args.config)

    try:
        project = store.load(config_path)
    except ConfigParseError as exc:
        if args.json:
            print_json({"valid": False, "error": str(exc)})
        else:
            print_error(_text(exc))
        return 1

    if project is None:
        if args.json:
            print_json({"valid": False, "error": "Config file not found"})
        else:
            print_error(f"Config file not found: {_text(config_path)}")
            print_info('Run "grablin init" to create a configuration file')
        return 1

    result = validate(project)
    module_count = len(project.modules) if isinstance(project.modules, list) else 0

    if args.json:
        print_json({
            "valid": result.valid,
            "errors": result.errors,
            "warnings": result.warnings,
            "config": {
                "projectName": project.project_name,
                "domain": project.domain,
                "moduleCount": module_count,
            },
        })
        return 0 if result.valid else 1

    print_section("Configuration Validation")
    console.print()
    print_kv("File", _text(config_path))
    not_set = "[dim](not set)[/dim]"
    print_kv("Project", _text(project.project_name) if project.project_name else not_set)
    print_kv("Domain", _text(project.domain) if project.domain else not_set)
    print_kv("Modules", str(module_count))
    console.print()

    if result.errors:
        console.print("[bold red]Errors:[/bold red]")
        for error in result.errors:
            console.print(f"  [red]✗[/red] {_text(error)}", highlight=False)
        console.print()

    if result.warnings:
        console.print("[bold yellow]Warnings:[/bold yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]⚠[/yellow] {_text(warning)}", highlight=False)
        console.print()

    if not result.valid:
        print_error("Configuration is invalid")
        return 1

    print_success("Configuration is valid")
    if not result.warnings:
        console.print()
        print_info("Ready to generate. Run: grablin generate")
    return 0


# ---------------------------------------------------------------------------
# whoami
# ---------------------------------------------------------------------------


def cmd_whoami(args: argparse.Namespace, config: Config) -> int:
    resolver = CredentialResolver(retry=config.identity, timeout=config.timeout)
    if not resolver.has_credential():
        console.print()
        print_info("Not authenticated.")
        print_section("Setup")
        console.print(f"  Set {PRIMARY_TOKEN_VAR} or {SECONDARY_TOKEN_VAR} environment variable:")
        console.print()
        console.print(f"    export {PRIMARY_TOKEN_VAR}=ghp_xxxx")
        console.print()
        console.print(f"  Create a token at: {TOKEN_URL}")
        console.print()
        return 0

    with create_status("Fetching user info"):
        user = asyncio.run(resolver.fetch_identity())

    if user is None:
        print_error("Invalid or expired token.")
        return 1

    print_section("Authenticated User")
    print_kv("Username", f"[cyan]{_text(user.login)}[/cyan]")
    if user.name:
        print_kv("Name", _text(user.name))
    if user.email:
        print_kv("Email", _text(user.email))
    print_kv("User ID", str(user.id))
    console.print()
    return 0


# ---------------------------------------------------------------------------
# Parser / entry point
# ---------------------------------------------------------------------------


def build_parser(config: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="grablin",
        description="CLI for Grablin project scaffolding",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  grablin init\n"
            "  grablin generate -o ./my-app\n"
            "  grablin generate --push-to-github --repo my-app --private\n"
        ),
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init", help="Initialize a new project configuration")
    p_init.add_argument("-c", "--config", default=config.config_file, help="Config file path")
    p_init.add_argument("-f", "--force", action="store_true", help="Overwrite existing config file")
    p_init.add_argument("-y", "--yes", action="store_true", help="Skip confirmation prompts")
    p_init.set_defaults(handler=cmd_init)

    p_gen = sub.add_parser("generate", help="Generate project from configuration")
    p_gen.add_argument("-c", "--config", default=config.config_file, help="Config file path")
    p_gen.add_argument("-o", "--output", help="Download and extract to local directory")
    p_gen.add_argument("--push-to-github", action="store_true", help="Push generated project to GitHub")
    p_gen.add_argument("--repo", help="GitHub repository name (default: project name)")
    p_gen.add_argument("--private", action="store_true", help="Make GitHub repository private")
    p_gen.add_argument("--api", default=None, help=f"API URL (default: {config.api_url})")
    p_gen.add_argument("-v", "--verbose", action="store_true", help="Verbose output")
    p_gen.add_argument("-q", "--quiet", action="store_true", help="Suppress output")
    p_gen.set_defaults(handler=cmd_generate)

    p_list = sub.add_parser("list", help="List available modules and extensions")
    p_list.add_argument(
        "type", nargs="?", help="Type to list: modules, extensions, providers, vcs (default: all)"
    )
    p_list.add_argument("--api", default=None, help=f"API URL (default: {config.api_url})")
    p_list.add_argument("--json", action="store_true", help="Output as JSON")
    p_list.set_defaults(handler=cmd_list)

    p_val = sub.add_parser("validate", help="Validate project configuration")
    p_val.add_argument("-c", "--config", default=config.config_file, help="Config file path")
    p_val.add_argument("--json", action="store_true", help="Output as JSON")
    p_val.set_defaults(handler=cmd_validate)

    p_who = sub.add_parser("whoami", help="Show current authenticated user")
    p_who.set_defaults(handler=cmd_whoami)

    return parser


def run(argv: Sequence[str] | None = None, config: Config | None = None) -> int:
    """Parse *argv*, dispatch to a subcommand and return its exit code."""
    if config is None:
        try:
            config = Config.from_env()
        except ValueError as exc:
            # pydantic.ValidationError is a ValueError too.
            print_error(f"Invalid GRABLIN_* environment setting: {_text(exc)}")
            return 1
    parser = build_parser(config)
    args = parser.parse_args(argv)
    configure_logging(getattr(args, "verbose", False))

    try:
        return args.handler(args, config)
    except ConfigParseError as exc:
        print_error(_text(exc))
        return 1
    except KeyboardInterrupt:
        print_info("Cancelled")
        return 130


def main() -> None:
    """Console-script entry point for ``grablin``."""
    sys.exit(run())


if __name__ == "__main__":
    main()
