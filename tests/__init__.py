# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Camp server:
# - test_csp.py, test_negotiation.py, test_validation.py, test_navigation.py,
#   test_session.py: Unit tests for the core/ logic
# - test_session_store.py: Store clients
# - test_config.py: Settings and PipelineConfig resolution
# - test_pipeline.py: Stage composition and ordering
# - test_stages.py, test_errors.py, test_routing.py: Full requests
#   through an assembled app
#
# Run tests with: pytest
# =============================================================================
