"""lambdaplay — interactive lambda-calculus workspace."""

__version__ = "0.1.0"
