"""Configuration resolution and validation."""
