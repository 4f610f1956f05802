"""Scrape pipeline: metric descriptors, report parsing and the collector."""
