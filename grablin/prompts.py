"""Interactive collection of a project description for ``grablin init``.

Answers are gathered with ``rich.prompt`` and assembled into a
:class:`ProjectDescription` whose module list follows a fixed order:
frontend, backend, extensions, provider, vcs.
"""

from __future__ import annotations

import re

from rich.console import Console
from rich.prompt import Confirm, Prompt

from grablin.schema.models import ModuleDescription, ModuleKind, ProjectDescription
from grablin.utils import console as default_console

FRONTEND_CHOICES: dict[str, str] = {
    "react": "React (Vite + TypeScript)",
    "nextjs": "Next.js (Static/SSR)",
    "none": "None",
}

BACKEND_CHOICES: dict[str, str] = {
    "spring": "Spring Boot (Java/Kotlin)",
    "drf": "Django REST Framework (Python)",
    "none": "None",
}

EXTENSION_CHOICES: dict[str, str] = {
    "auth0": "Auth0 (Authentication)",
    "okta": "Okta (Enterprise SSO)",
    "stytch": "Stytch (Passwordless)",
    "stripe": "Stripe (Payments)",
    "rbac": "RBAC (Role-based access)",
    "redis": "Redis (Caching)",
    "memorydb": "MemoryDB (In-memory store)",
    "rdbms": "RDBMS (PostgreSQL)",
    "ratelimit": "Rate Limiting",
    "webhooks": "Webhooks (Outbound)",
    "auditlog": "Audit Log",
    "teams": "Teams (Multi-tenancy)",
    "customdomain": "Custom Domain",
    "cloudflare": "Cloudflare (CDN/DNS)",
    "route53": "Route53 (DNS)",
    "whitelabel": "Whitelabel",
}

PROVIDER_CHOICES: dict[str, str] = {
    "aws": "AWS",
    "digitalocean": "DigitalOcean",
    "none": "None (local only)",
}

VCS_CHOICES: dict[str, str] = {
    "github": "GitHub",
    "none": "None",
}

DEFAULT_ENVIRONMENTS = "dev, staging, prod"

_PROJECT_NAME_RE = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]*")
_DOMAIN_RE = re.compile(r"[a-z0-9][a-z0-9-]*(\.[a-z0-9][a-z0-9-]*)*\.[a-z]{2,}")
_EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")


def _ask_matching(
    label: str,
    pattern: re.Pattern[str],
    hint: str,
    console: Console,
    default: str | None = None,
) -> str:
    """Ask until the answer matches *pattern*."""
    while True:
        if default is None:
            answer = Prompt.ask(label, console=console)
        else:
            answer = Prompt.ask(label, console=console, default=default)
        answer = (answer or "").strip()
        if pattern.fullmatch(answer):
            return answer
        console.print(f"[red]{hint}[/red]")


def _choice(value: str) -> str | None:
    return None if value == "none" else value


def parse_list(raw: str) -> list[str]:
    """Split a comma-separated answer into trimmed, non-empty items."""
    return [item.strip() for item in raw.split(",") if item.strip()]


def build_modules(
    frontend: str | None,
    backend: str | None,
    extensions: list[str],
    provider: str | None,
    vcs: str | None,
) -> list[ModuleDescription]:
    """Assemble the module list from stack answers."""
    modules: list[ModuleDescription] = []
    if frontend:
        modules.append(ModuleDescription(
            kind=ModuleKind.CODE.value, type=frontend, moduleId="frontend",
            layers=["frontend", "cicd"], fieldValues={},
        ))
    if backend:
        modules.append(ModuleDescription(
            kind=ModuleKind.CODE.value, type=backend, moduleId="api",
            layers=["backend", "cicd"], fieldValues={},
        ))
    for ext in extensions:
        modules.append(ModuleDescription(
            kind=ModuleKind.EXTENSION.value, type=ext, moduleId=ext, fieldValues={},
        ))
    if provider:
        modules.append(ModuleDescription(
            kind=ModuleKind.PROVIDER.value, type=provider, moduleId=provider,
            layers=["ops"], fieldValues={},
        ))
    if vcs:
        modules.append(ModuleDescription(
            kind=ModuleKind.VCS.value, type=vcs, moduleId=vcs,
            layers=["cicd"], fieldValues={},
        ))
    return modules


def prompt_for_config(console: Console | None = None) -> ProjectDescription:
    """Interactively collect a project description.

    Args:
        console: Console to prompt on. Defaults to the shared CLI console.
    """
    console = console or default_console

    project_name = _ask_matching(
        "Project name",
        _PROJECT_NAME_RE,
        "Project name must start with a letter and contain only letters, numbers, "
        "hyphens, and underscores",
        console,
        default="my-app",
    )
    description = Prompt.ask("Project description", console=console, default="").strip()
    domain = _ask_matching(
        "Domain (e.g., myapp.com)",
        _DOMAIN_RE,
        "Please enter a valid domain (e.g., myapp.com)",
        console,
    )
    owner = _ask_matching(
        "Owner email", _EMAIL_RE, "Please enter a valid email address", console
    )

    frontend = _choice(Prompt.ask(
        "Frontend framework", console=console,
        choices=list(FRONTEND_CHOICES), default="react",
    ))
    backend = _choice(Prompt.ask(
        "Backend framework", console=console,
        choices=list(BACKEND_CHOICES), default="none",
    ))

    console.print("[dim]Available extensions: " + ", ".join(EXTENSION_CHOICES) + "[/dim]")
    extensions: list[str] = []
    while True:
        requested = parse_list(Prompt.ask("Extensions (comma-separated)", console=console, default=""))
        unknown = [ext for ext in requested if ext not in EXTENSION_CHOICES]
        if not unknown:
            extensions = list(dict.fromkeys(requested))
            break
        console.print(f"[red]Unknown extension(s): {', '.join(unknown)}[/red]")

    provider = _choice(Prompt.ask(
        "Cloud provider", console=console,
        choices=list(PROVIDER_CHOICES), default="none",
    ))
    vcs = _choice(Prompt.ask(
        "Version control", console=console,
        choices=list(VCS_CHOICES), default="github",
    ))
    environments = parse_list(
        Prompt.ask("Environments (comma-separated)", console=console, default=DEFAULT_ENVIRONMENTS)
    )

    return ProjectDescription(
        projectName=project_name,
        description=description or None,
        domain=domain,
        owner=owner,
        modules=build_modules(frontend, backend, extensions, provider, vcs),
        environments=environments,
        provider=provider,
        vcs=vcs,
    )


def confirm_overwrite(path: str, console: Console | None = None) -> bool:
    """Ask whether an existing config file may be replaced (default: no)."""
    return Confirm.ask(
        f"{path} already exists. Overwrite?", console=console or default_console, default=False
    )
