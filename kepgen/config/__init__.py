"""Configuration package - constants shared by the core and the CLI."""

from .constants import *  # noqa: F401,F403
