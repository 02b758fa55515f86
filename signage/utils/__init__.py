"""
Signage Utility Functions.

This package contains utility functions and decorators used across the CMS:
- auth: Authentication decorators and token validation
- dates: Timestamp formatting for SQL writes
"""

from signage.utils.auth import login_required, get_current_user
from signage.utils.dates import get_system_date

__all__ = [
    # Auth
    'login_required',
    'get_current_user',
    # Dates
    'get_system_date',
]
