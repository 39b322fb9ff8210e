"""Government office service portal."""
