"""Data models for the navigation console."""
