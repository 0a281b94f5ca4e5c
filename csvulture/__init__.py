"""CSVulture — tools for working with CSV and other delimited data sets.

Two components run inside a dataflow host:
  - Read CSV      → one output per detected column (or row)
  - Get From Web  → body of a single HTTP GET

The host itself lives in csvulture.host; components are discovered through
csvulture.plugins.
"""

__version__ = "1.0.1"
