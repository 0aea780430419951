"""
Scripts package for the LinkedIn people-search crawler.

These scripts are standalone executables that can be run directly:
- crawl.py: Log in, search and save the results to CSV (python -m scripts.crawl)
"""
