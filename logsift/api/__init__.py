"""
HTTP API for browsing and filtering loaded logs.
"""
