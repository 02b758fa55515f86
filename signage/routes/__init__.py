"""
Signage Routes Package

Blueprint registration for all route modules:
- Auth: Session login and logout
- Layouts: Layout management API
- Applications: OAuth application registration and consent pages
- OAuth: Token endpoint
"""

# Import Auth blueprint from its module
from signage.routes.auth import auth_bp

# Import Layouts blueprint from its module
from signage.routes.layouts import layouts_bp

# Import Applications and OAuth blueprints from their module
from signage.routes.applications import applications_bp, oauth_bp
