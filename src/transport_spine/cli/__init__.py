"""transport-spine command-line interface (``transport-spine`` entry point)."""
