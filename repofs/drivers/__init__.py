"""Driver implementations of the kernel ports."""
