"""Ports and application state shared by connectors and the task subsystem."""
