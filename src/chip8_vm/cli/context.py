"""
Shared CLI Context
==================

Click context object shared by the command-line tools. It carries the
common options and owns logging setup, so every tool configures logging
the same way: DEBUG with logger names when verbose, INFO otherwise.
"""

import logging

import click


class Context:
    """
    Shared context for CLI commands.

    Stores common options like verbosity.
    """

    def __init__(self) -> None:
        self.verbose: bool = False

    @property
    def log_level(self) -> int:
        return logging.DEBUG if self.verbose else logging.INFO

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        logging.basicConfig(
            level=self.log_level,
            format="%(levelname)s: %(name)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)
