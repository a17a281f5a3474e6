"""HTTP API: Flask app (server.py) over the projection, scenario and store services (service.py)."""
