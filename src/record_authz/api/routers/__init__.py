"""
record_authz.api.routers

HTTP routers (health, dev identity tools, forecasts, admin area).
"""
