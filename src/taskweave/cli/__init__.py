"""Command line interface: bootstrap, commands, entrypoint."""
