"""Pipeline glue for parsing, annotating and formatting Elixir source."""

from .pipeline import FormatError, FormatOptions, FormatResult, FrontEndResult, format_source, run_frontend

__all__ = ["FormatError", "FormatOptions", "FormatResult", "FrontEndResult", "format_source", "run_frontend"]
