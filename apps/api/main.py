"""Thin API launcher.

This is the uvicorn entrypoint. All application logic lives in the figtokens package.
Run with: uvicorn main:app --reload

The app instance is created here (not in figtokens.app) so tests can import
create_app without all environment variables configured.
"""

from figtokens.app import add_request_id_middleware, create_app

app = create_app()
# Added LAST so it runs FIRST (outermost)
add_request_id_middleware(app)

__all__ = ["app"]
