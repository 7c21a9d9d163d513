"""
Field expression evaluation for seqinfo.

Each configured field is a Jinja2 template compiled once in a sandboxed
environment. A template sees exactly one variable, the entity of its row
(``seq`` for sequence fields, ``mov`` for movie fields), plus the helpers of
a HelperTable.
"""

from __future__ import annotations

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from jinja2 import StrictUndefined, Template, TemplateError
from jinja2.sandbox import SandboxedEnvironment

from ..core.constants import DEFAULT_ALLOWED_COMMANDS
from ..core.types import Entity, EntityKind
from ..errors import (
    CommandError,
    ConfigError,
    FieldErrorKind,
    FieldEvaluationError,
    UnsafeCommandError,
)
from ..utils.path import remap_prefix
from ..utils.subprocess import run_subprocess

CommandRunner = Callable[[list[str]], tuple[int, str]]


@dataclass(frozen=True)
class HelperTable:
    """The functions field expressions may call.

    Attributes:
        allowed_commands: Exact command names ``output`` may run.
        runner: Executes a command list and returns (exit_code, output).
    """

    allowed_commands: frozenset[str] = frozenset(DEFAULT_ALLOWED_COMMANDS)
    runner: CommandRunner = field(default=run_subprocess, repr=False)

    def output(self, *args: str) -> str:
        """Run an allow-listed command and return its combined output."""
        if not args:
            raise CommandError("command not specified")
        cmd = str(args[0])
        if cmd not in self.allowed_commands:
            raise UnsafeCommandError(f"unsafe command: {cmd}")
        code, out = self.runner([cmd, *(str(a) for a in args[1:])])
        if code != 0:
            raise CommandError(f"failed to execute: {out.strip()}")
        return out

    def functions(self) -> Mapping[str, Callable[..., str]]:
        return MappingProxyType(
            {
                "remap": remap_prefix,
                "dirname": os.path.dirname,
                "abspath": os.path.abspath,
                "output": self.output,
            }
        )


class FieldEvaluator:
    """Compiled field expressions for both entity kinds."""

    def __init__(
        self,
        seq_fields: Mapping[str, str],
        mov_fields: Mapping[str, str],
        helpers: HelperTable | None = None,
    ) -> None:
        """Compile every expression.

        Args:
            seq_fields: Field name -> expression for sequence rows.
            mov_fields: Field name -> expression for movie rows.
            helpers: Helper functions exposed to expressions.

        Raises:
            ConfigError: If an expression does not compile.
        """
        self.helpers = helpers or HelperTable()
        env = SandboxedEnvironment(undefined=StrictUndefined, autoescape=False)
        env.globals.clear()
        env.globals.update(self.helpers.functions())
        env.filters.update(self.helpers.functions())
        self._env = env
        self._templates: dict[EntityKind, dict[str, Template]] = {
            EntityKind.SEQUENCE: self._compile(EntityKind.SEQUENCE, seq_fields),
            EntityKind.MOVIE: self._compile(EntityKind.MOVIE, mov_fields),
        }

    def _compile(self, kind: EntityKind, fields: Mapping[str, str]) -> dict[str, Template]:
        compiled: dict[str, Template] = {}
        for name, expression in fields.items():
            try:
                compiled[name] = self._env.from_string(expression)
            except TemplateError as e:
                raise ConfigError(f"invalid expression for {kind.value} field '{name}': {e}") from e
        return compiled

    def field_names(self, kind: EntityKind) -> list[str]:
        """Field names configured for ``kind``, in configuration order."""
        return list(self._templates[kind])

    def evaluate(self, field_name: str, entity: Entity) -> str:
        """Render ``field_name`` against ``entity`` and strip surrounding whitespace.

        Raises:
            FieldEvaluationError: If the field is unknown for the entity kind or
                rendering fails.
        """
        templates = self._templates[entity.kind]
        template = templates.get(field_name)
        if template is None:
            raise FieldEvaluationError(
                FieldErrorKind.EVALUATION, f"no {entity.kind.value} field named '{field_name}'"
            )
        try:
            text = template.render({entity.kind.value: entity})
        except UnsafeCommandError as e:
            raise FieldEvaluationError(FieldErrorKind.UNSAFE_COMMAND, f"{field_name}: {e}") from e
        except Exception as e:
            raise FieldEvaluationError(FieldErrorKind.EVALUATION, f"{field_name}: {e}") from e
        return text.strip()
