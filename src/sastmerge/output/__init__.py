"""Report sinks — Rich terminal table and JSON."""
