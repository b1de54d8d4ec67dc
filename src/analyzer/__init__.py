"""Layout analysis for Elixir syntax trees: source line ledger and annotation pass."""

from .annotator import AnnotationResult, annotate, layout_target
from .ledger import SourceLedger, fingerprint

__all__ = [
    "AnnotationResult",
    "SourceLedger",
    "annotate",
    "fingerprint",
    "layout_target",
]
