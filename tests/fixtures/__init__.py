"""Shared pytest fixtures and helpers for library tests."""

from .core import *  # noqa: F401,F403
