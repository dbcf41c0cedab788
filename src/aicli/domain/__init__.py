"""Domain models for aicli."""
