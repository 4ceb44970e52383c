"""Command line entrypoints for lambdacf."""
