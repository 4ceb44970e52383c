"""HTTP entrypoint exposing the template compiler."""
