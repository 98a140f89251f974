"""Entry points: CLI, inbound request handler and component wiring."""
