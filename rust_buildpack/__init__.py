"""Buildpack that provisions a cached Rust toolchain and builds the application."""

__version__ = "0.1.0"
