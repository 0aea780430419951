"""
LinkedIn people-search crawler.

Logs in with Playwright, runs a keyword people search, extracts result cards
into flat profile records and writes them to a CSV file.
"""
