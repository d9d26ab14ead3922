# =============================================================================
# core/ - Framework-Agnostic Request Logic
# =============================================================================
# This package contains the logic the pipeline stages are built from:
# - csp.py: Trusted origins and Content-Security-Policy assembly
# - session.py: Session records and flash messages
# - navigation.py: Which paths become the post-login return path
# - validation.py: Chainable request validator
# - negotiation.py: Accept header negotiation
#
# Code in this package should NOT import from FastAPI or Starlette.
# This keeps the logic testable and reusable.
# =============================================================================
