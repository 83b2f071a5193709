"""certvault - cached, optionally encrypted certificate storage on S3."""

__version__ = "0.1.0"
