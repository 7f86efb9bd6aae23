"""Sync a local secrets file with AWS SSM Parameter Store."""

__version__ = "0.1.0"
