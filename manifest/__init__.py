"""Cargo manifests: lists of item templates with quantities."""
