"""CLI command groups.

- roadmap: Whole-roadmap commands (init, show, overview, migrate, export, serve)
- item: Single-item commands (add, remove, edit, status, progress, validate)
"""

from milepost.interfaces.cli.commands import item, roadmap

__all__ = ["item", "roadmap"]
