"""Utilities for emitting formatted Elixir source and restoring inline comments."""

from .writer import EmitOptions, EmitResult, emit_module, reinject_inline_comments

__all__ = ["EmitOptions", "EmitResult", "emit_module", "reinject_inline_comments"]
