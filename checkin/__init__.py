"""
checkin - Guest-List Lookup & Check-In Client
==============================================

A Python package for looking up guest-list entries held by a spreadsheet-backed
web app and marking attendees as checked in at the venue.

Modules:
--------
- config.py       : Configuration management (loads settings from .env)
- models.py       : Attendee records, search criteria and decoded responses
- http_client.py  : HTTP client for the lookup / check-in web app
- selector.py     : Deep-link parameter selection and query building
- name_index.py   : One-shot load of all responder names
- autocomplete.py : Name suggestions while typing
- coordinator.py  : Search, selection and batch check-in orchestration
- report.py       : Tabular rendering of the current attendee list
- run_checkin.py  : Main entry point and interactive loop

Usage:
------
    python -m checkin.run_checkin
    python -m checkin.run_checkin --url "https://example.org/?uniqueId=AB12"
    python -m checkin.run_checkin --email alice@example.com --debug

Workflow:
---------
1. Load configuration from .env file
2. Load the list of responder names for autocomplete
3. If a deep link was given, look it up straight away
4. Otherwise, search by Unique ID, Name or Email interactively
5. Select attendees that are not yet checked in and submit the batch
6. The list is fetched again so the server's statuses are shown
"""
