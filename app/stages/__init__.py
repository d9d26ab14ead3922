# =============================================================================
# app/stages/ - Pipeline Stages
# =============================================================================
# Each module builds one or more stages for the request pipeline:
# - host.py: Canonical host redirect (production)
# - assets.py: LESS preprocessing and static files
# - request_log.py: One log line per request
# - body.py: Body parsing, method override, cookie parsing
# - validation.py: Request validator
# - session.py: Store-backed sessions and flash messages
# - auth.py: Identity restoration and template exposure
# - security.py: Powered-by removal, security headers, CORS, CSP
# - navigation.py: Post-login return path
#
# The order they run in is fixed by app/assembler.py.
# =============================================================================
