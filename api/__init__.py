"""HTTP API for the FuelEU Compliance Engine."""
