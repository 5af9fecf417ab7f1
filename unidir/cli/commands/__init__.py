"""CLI commands."""

from unidir.cli.commands import doctor, users

__all__ = ["doctor", "users"]
