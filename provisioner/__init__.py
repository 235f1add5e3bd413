"""Home server provisioning helpers: resilient artifact fetching and install."""
