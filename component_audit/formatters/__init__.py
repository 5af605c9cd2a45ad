"""Output formatters for component-audit."""

from .markdown import generate_markdown
