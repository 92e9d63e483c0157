"""One-class-per-file counter implementations."""
