# =============================================================================
# app/ - FastAPI Application Package
# =============================================================================
# This package contains the FastAPI web application:
# - main.py: Process entry point, crash handling, store wiring
# - config.py: Environment variable loading and settings
# - assembler.py: Builds the pipeline and the app from explicit inputs
# - pipeline.py: Request context and ordered stage execution
# - stages/: One module per pipeline concern
# - exceptions.py: Exceptions and the terminal error responder
# - routers/: Mounted route handlers, in mount order
#
# The app layer is thin - it handles HTTP concerns and delegates
# request logic to the core/ package.
# =============================================================================
