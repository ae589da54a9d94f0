"""tinytl - Tiny Template Language"""

from tinytl._version import __version__

# Re-export from ast
from tinytl.ast import (
    EqualsOperator,
    IfDirective,
    JoinDirective,
    Node,
    Parser,
    Reference,
    Sequence,
    Text,
    parse,
)

# Re-export from engine
from tinytl.engine import Evaluator, Printer, debug, evaluate, to_json
from tinytl.engine.evaluator import test

from tinytl.config import EngineConfig, load_config
from tinytl.errors import EvaluationError, ParsingError, TemplateError
from tinytl.template import Template
from tinytl.values import List, Map, Scalar, Value, resolve, to_value, truthy

__all__ = [
    "__version__",
    # ast
    "EqualsOperator",
    "IfDirective",
    "JoinDirective",
    "Node",
    "Parser",
    "Reference",
    "Sequence",
    "Text",
    "parse",
    # engine
    "Evaluator",
    "Printer",
    "debug",
    "evaluate",
    "test",
    "to_json",
    # config
    "EngineConfig",
    "load_config",
    # errors
    "EvaluationError",
    "ParsingError",
    "TemplateError",
    # values
    "List",
    "Map",
    "Scalar",
    "Value",
    "resolve",
    "to_value",
    "truthy",
    "Template",
]
