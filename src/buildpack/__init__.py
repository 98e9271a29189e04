"""Buildpack manifest (installable dependency catalog) support."""
