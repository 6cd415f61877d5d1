"""Shared utilities for rego-loader."""
