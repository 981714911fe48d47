"""Shared helpers: errors, validation, logging, seeding and thermodynamics."""
