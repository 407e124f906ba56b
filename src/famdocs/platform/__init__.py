"""famdocs platform features."""
