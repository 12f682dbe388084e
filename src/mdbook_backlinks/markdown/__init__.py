"""Markdown parsing, fragment building and splicing."""
