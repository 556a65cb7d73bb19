"""Infrastructure adapters: persistence, security, email and push delivery."""
