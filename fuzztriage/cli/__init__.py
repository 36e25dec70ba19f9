"""fuzztriage CLI — Typer-based command-line interface.

Provides the ``fuzztriage`` command with subcommands for running a fuzz
campaign, previewing corpus detection, and checking the toolchain.

All output uses Rich for formatted terminal display.
"""
