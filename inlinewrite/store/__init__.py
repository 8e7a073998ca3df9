"""Durable key-value namespaces shared between processes."""
