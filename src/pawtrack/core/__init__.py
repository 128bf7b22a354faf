"""Shared plumbing: configuration, logging, errors, signals and the CLI."""
