"""Jira to Pivotal Tracker CSV export tool."""
