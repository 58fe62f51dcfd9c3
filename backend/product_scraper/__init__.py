"""Headless-browser product page scraper."""
