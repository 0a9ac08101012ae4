"""PySide6 adapters that translate widget events into engine calls."""
