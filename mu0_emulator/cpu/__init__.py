"""MU0 CPU internals: registers, ALU, decoder."""
