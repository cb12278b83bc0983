"""
Data Processing Pipeline

Components for ingesting contact snapshots, resolving connection
references, and generating reports.
"""

from src.pipeline.ingest import load_contacts, ContactSnapshot
from src.pipeline.normalize import ConnectionResolver, resolve_connection_names
from src.pipeline.outputs import generate_outputs, OutputGenerator

__all__ = [
    "load_contacts",
    "ContactSnapshot",
    "ConnectionResolver",
    "resolve_connection_names",
    "generate_outputs",
    "OutputGenerator",
]
