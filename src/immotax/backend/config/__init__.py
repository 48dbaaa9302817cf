"""Fiscal year configuration: schema, loader and validation helpers."""
