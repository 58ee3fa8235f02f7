"""Developer tooling shipped with the solver."""
