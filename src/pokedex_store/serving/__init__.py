"""
Serving — FastAPI application exposing the record store and the ingest
trigger over HTTP.
"""
