"""Report rendering, daily files and email bodies."""
