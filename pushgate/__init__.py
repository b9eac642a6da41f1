"""PushGate — push a branch to its default remote with on-demand credentials."""

__version__ = "0.1.0"
