"""Building blocks for a Jira board tracking service."""

__version__ = "0.1.0"