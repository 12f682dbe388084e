"""mdbook preprocessor that appends a backlinks block to linked chapters."""

from __future__ import annotations

__version__ = "0.1.0"
