"""nanotrust — Telemetry"""

from nanotrust.telemetry.logging import add_subsystem, retrieval_context, setup_logging

__all__ = ["add_subsystem", "retrieval_context", "setup_logging"]
