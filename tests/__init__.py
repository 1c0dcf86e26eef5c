"""
onview.art OG image test suite

Structure:
- unit/: unit tests for the resolver, preview fetcher, media downloads,
  composer, handler, server and config; logging in test_logging_setup.py
"""
