"""
FastAPI Task Tracker backend package.

The application lives in src.api.main; it is not imported here so that the
client library can reuse the store and error types without configuring
logging or building the app.
"""
