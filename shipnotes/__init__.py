"""shipnotes - changelog and draft release automation for the PowerShell editor repos."""

__version__ = "0.3.0"
