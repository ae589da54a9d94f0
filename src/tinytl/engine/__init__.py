"""tinytl engine - evaluates, prints and exports parsed templates."""

from tinytl.engine.evaluator import Evaluator, evaluate
from tinytl.engine.exporter import to_json
from tinytl.engine.printer import Printer, debug

__all__ = ["Evaluator", "Printer", "evaluate", "debug", "to_json"]
