"""
Agents of the build pipeline.

DESIGN LAYER:
- Architect: stack selection and high-level structure
- Frontend: UI components and routes (runs in parallel with Backend)
- Backend: API endpoints and data models
- Database: schema optimization from the backend models

DELIVERY LAYER:
- Coder: one source file per call
- DevOps: deployment configuration files

Each role module builds the AgentRequest for its phase; AgentRunner executes it.
"""

from .architect import build_architecture_request
from .backend import build_backend_request
from .base import AgentRequest, build_structured_prompt
from .coder import FileSpec, build_code_request, plan_files
from .database import build_database_request
from .devops import build_deployment_request
from .frontend import build_frontend_request
from .runner import AgentRunner


__all__ = [
    "AgentRequest",
    "AgentRunner",
    "build_structured_prompt",
    # Design
    "build_architecture_request",
    "build_frontend_request",
    "build_backend_request",
    "build_database_request",
    # Delivery
    "FileSpec",
    "plan_files",
    "build_code_request",
    "build_deployment_request",
]
