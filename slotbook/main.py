"""
Name: Backend ASGI Entrypoint (slotbook.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep this module side-effect free beyond importing slotbook.api.main

Collaborators:
  - slotbook.api.main: module that constructs and exposes the FastAPI app
  - ASGI servers (uvicorn) configured to import slotbook.main:app

Notes/Constraints:
  - No configuration or IO should live here; keep it thin and predictable
  - Changing this path is a deployment-breaking change for infra scripts
"""

from slotbook.api.main import app

__all__ = ["app"]
