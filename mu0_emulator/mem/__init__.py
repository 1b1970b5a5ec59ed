"""MU0 memory."""
