"""Command-line surface: entry point, composition root, slash commands and rendering."""
