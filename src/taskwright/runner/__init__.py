"""Command-line runner: settings, logging, task files and shell execution."""
