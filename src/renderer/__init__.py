"""Rendering of annotated Elixir syntax trees back to source text."""

from .core import (
    DEFAULT_PARENLESS_CALLS,
    Decorate,
    RenderState,
    Renderer,
    adjust_new_lines,
    decorate_layout,
    render,
)

__all__ = [
    "DEFAULT_PARENLESS_CALLS",
    "Decorate",
    "RenderState",
    "Renderer",
    "adjust_new_lines",
    "decorate_layout",
    "render",
]
