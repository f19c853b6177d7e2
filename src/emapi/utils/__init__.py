"""Diagnostic helpers: label tables and printers."""
