"""Typer command-line client for the weather logger service; commands live in ``cli.app``."""
