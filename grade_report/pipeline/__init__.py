"""Headless pipeline stages: report generation and mail distribution."""
