"""Template - a parsed template ready to be rendered many times."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional

from tinytl.ast.node import Sequence
from tinytl.ast.parser import Parser
from tinytl.config import EngineConfig
from tinytl.engine.evaluator import Evaluator
from tinytl.engine.printer import Printer
from tinytl.values import to_context, to_value

log = logging.getLogger(__name__)


class Template:
    """Parse once, render many.

    Example:
        >>> Template("hello {$name}").render(name="arthur")
        'hello arthur'
    """

    def __init__(self, source: str, config: Optional[EngineConfig] = None):
        self.source = source
        self.config = config or EngineConfig()
        self.root: Sequence = Parser().parse(source)
        self._evaluator = Evaluator(self.config)

    @classmethod
    def from_file(
        cls, path: str | Path, config: Optional[EngineConfig] = None
    ) -> "Template":
        """Load a template from a UTF-8 file."""
        p = Path(path)
        log.debug("Loading template from %s", p)
        return cls(p.read_text(encoding="utf-8"), config)

    def render(self, context: Any = None, **bindings: Any) -> str:
        """Render against `context`, with keyword `bindings` layered on top."""
        ctx = to_context(context)
        for name, value in bindings.items():
            ctx = ctx.bind(name, to_value(value))
        return self._evaluator.evaluate(self.root, ctx)

    def debug(self) -> str:
        """Canonical text of the parsed template."""
        return Printer(self.config).debug(self.root)

    def __repr__(self) -> str:
        return f"Template({self.source!r})"
