"""Campus attendance package.

Organized by feature modules (tokens, geofence, sessions, attendance,
progression) with a thin Flask controller layer over service/repository
layers.
"""
