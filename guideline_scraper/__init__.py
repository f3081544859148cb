"""Scrapes Symptoms and Diagnosis guideline sections into a JSON Lines file."""

__version__ = "0.1.0"
