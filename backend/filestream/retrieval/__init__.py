"""Retrieval of registered files over HTTP.

Every request re-resolves the key against the storage conversation and
downloads the payload again; nothing is cached locally.
"""
