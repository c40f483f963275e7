"""
Data models and contracts module.

Immutable value objects passed between analysis stages and the
structured analysis result handed to presentation collaborators.
"""
