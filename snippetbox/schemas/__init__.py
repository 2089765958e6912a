"""
Snippetbox — Schemas Package
==============================

What:  Pydantic models for the data that crosses the HTTP boundary:
       HTML form submissions (forms.py) and JSON status payloads (health.py).
"""
