"""VetCare clinic core: appointments, clinical records and purchase history."""

__version__ = "1.0.0"
