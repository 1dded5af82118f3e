"""Configuration layer — TOML models, settings resolution, logging setup."""
