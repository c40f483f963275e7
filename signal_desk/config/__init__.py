"""
Strategy configuration module.

Frozen parameter dataclasses, YAML-backed per-symbol overrides and
parameter validation.
"""
