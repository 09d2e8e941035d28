"""Metrics aggregation and periodic reporting for the pizza ordering service."""
