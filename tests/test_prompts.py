"""Unit tests for interactive project setup (grablin.prompts).

``rich.prompt`` is patched so no terminal input is needed.
"""

from __future__ import annotations

import io
from unittest.mock import patch

import pytest
from rich.console import Console

from grablin.prompts import (
    DEFAULT_ENVIRONMENTS,
    build_modules,
    confirm_overwrite,
    parse_list,
    prompt_for_config,
)
from grablin.schema import validate


@pytest.fixture
def quiet_console() -> Console:
    return Console(file=io.StringIO(), force_terminal=False)


def _answers(**overrides):
    answers = {
        "name": "my-app",
        "description": "Demo",
        "domain": "myapp.com",
        "owner": "me@myapp.com",
        "frontend": "react",
        "backend": "drf",
        "extensions": "auth0, stripe",
        "provider": "aws",
        "vcs": "github",
        "environments": DEFAULT_ENVIRONMENTS,
    }
    answers.update(overrides)
    return list(answers.values())


class TestParseList:
    @pytest.mark.unit
    def test_splits_and_trims(self):
        assert parse_list(" dev , staging,prod ") == ["dev", "staging", "prod"]

    @pytest.mark.unit
    def test_drops_empty_items(self):
        assert parse_list(",, a,,") == ["a"]
        assert parse_list("") == []


class TestBuildModules:
    @pytest.mark.unit
    def test_full_stack_order(self):
        modules = build_modules("react", "drf", ["auth0", "stripe"], "aws", "github")

        assert [(m.kind, m.module_id) for m in modules] == [
            ("code", "frontend"),
            ("code", "api"),
            ("extension", "auth0"),
            ("extension", "stripe"),
            ("provider", "aws"),
            ("vcs", "github"),
        ]
        assert modules[0].layers == ["frontend", "cicd"]
        assert modules[1].layers == ["backend", "cicd"]
        assert modules[4].layers == ["ops"]
        assert modules[5].layers == ["cicd"]

    @pytest.mark.unit
    def test_skips_unselected(self):
        modules = build_modules(None, None, [], None, None)
        assert modules == []

    @pytest.mark.unit
    def test_backend_only(self):
        modules = build_modules(None, "spring", [], None, "github")
        assert [m.type for m in modules] == ["spring", "github"]


class TestPromptForConfig:
    @pytest.mark.unit
    def test_builds_valid_description(self, quiet_console):
        with patch("grablin.prompts.Prompt.ask", side_effect=_answers()):
            config = prompt_for_config(quiet_console)

        assert config.project_name == "my-app"
        assert config.description == "Demo"
        assert config.domain == "myapp.com"
        assert config.owner == "me@myapp.com"
        assert config.environments == ["dev", "staging", "prod"]
        assert config.provider == "aws"
        assert len(config.modules) == 6
        assert validate(config).valid is True

    @pytest.mark.unit
    def test_none_choices(self, quiet_console):
        answers = _answers(backend="none", extensions="", provider="none", vcs="none", description="")
        with patch("grablin.prompts.Prompt.ask", side_effect=answers):
            config = prompt_for_config(quiet_console)

        assert [m.module_id for m in config.modules] == ["frontend"]
        assert config.provider is None
        assert config.vcs is None
        assert config.description is None

    @pytest.mark.unit
    def test_reasks_invalid_answers(self, quiet_console):
        answers = _answers()
        # Invalid name, then invalid domain, before the good answers.
        answers[0:1] = ["1bad", "my-app"]
        answers[3:4] = ["not a domain", "myapp.com"]
        with patch("grablin.prompts.Prompt.ask", side_effect=answers) as ask:
            config = prompt_for_config(quiet_console)

        assert config.project_name == "my-app"
        assert config.domain == "myapp.com"
        assert ask.call_count == len(answers)

    @pytest.mark.unit
    def test_reasks_unknown_extension(self, quiet_console):
        answers = _answers()
        answers[6:7] = ["auth0, mongodb", "auth0, auth0"]
        with patch("grablin.prompts.Prompt.ask", side_effect=answers):
            config = prompt_for_config(quiet_console)

        extensions = [m.module_id for m in config.modules if m.kind == "extension"]
        assert extensions == ["auth0"]


class TestConfirmOverwrite:
    @pytest.mark.unit
    @pytest.mark.parametrize("answer", [True, False])
    def test_returns_answer(self, quiet_console, answer):
        with patch("grablin.prompts.Confirm.ask", return_value=answer) as ask:
            assert confirm_overwrite("grablin.json", quiet_console) is answer
        assert ask.call_args.kwargs["default"] is False
        assert "grablin.json" in ask.call_args.args[0]
