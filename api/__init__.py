"""
API feature packages, one folder per resource (models, routes, services).
"""
