"""BloodLink client: doctors, blood banks and donors on one request/alert workflow."""

__version__ = "0.1.0"
