"""CEP Weather - postal code to current temperature, across two traced services."""

SERVICE_VERSION = "1.0.0"
