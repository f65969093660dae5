"""Jira API client, models and description rendering."""