"""Exporters package — convert indicator reports and quotes to output formats."""
from fundwise.exporters.markdown import (
    format_indicator_value,
    render_indicators_markdown,
    render_quote_markdown,
)

__all__ = ["format_indicator_value", "render_indicators_markdown", "render_quote_markdown"]
