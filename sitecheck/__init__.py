"""Company Website Tracker

Checks whether companies from a business directory have a public website by
searching the web and matching result domains against the company name.
"""

__version__ = "0.1.0"
__description__ = "Company website tracking from business directory data"
