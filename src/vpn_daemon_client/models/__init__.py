"""Data models for daemon results."""

from .session import SessionEntry
