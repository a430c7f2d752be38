"""Storage integrations for turnstile."""
