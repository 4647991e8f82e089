"""ASGI entrypoint for the visit tracker API."""

from visit_tracker.api.app import create_app
from visit_tracker.containers import build_container

app = create_app(build_container())
