"""Infrastructure layer: persistence, security, messaging, and external adapters."""
