"""Shared helpers: decimals and display formatting, dates, logging, sanitizing."""
