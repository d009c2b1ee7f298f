"""Core package for the SmartBolt gas-pipeline monitoring dashboard."""

__all__ = ["charts", "gui", "io", "telemetry"]
__version__ = "0.1.0"
