"""Adaptadores concretos de las interfaces del Core."""
