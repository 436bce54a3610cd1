"""Configuration, logging, error handling and HTTP plumbing."""
