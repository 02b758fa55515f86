"""
User Model for Signage CMS.

Represents a user account. Users own layouts (``layout.userId``), log in to
the web UI through Flask-Login and grant OAuth applications access to the API.

Status workflow:
- active: Normal active account
- suspended: Temporarily disabled
"""

from datetime import datetime, timezone

from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash

from signage.models import db


class User(UserMixin, db.Model):
    """
    SQLAlchemy model representing a user account.

    Attributes:
        id: Integer identifier, referenced as the owner of layouts
        email: Unique email address used for login
        password_hash: Hashed password (never store plaintext)
        name: User's display name
        group_id: The user's own permission group
        status: Account status (active, suspended)
        last_login: Timestamp of last successful login
        created_at: Timestamp when the user was created
    """

    __tablename__ = 'users'

    id = db.Column('userId', db.Integer, primary_key=True, autoincrement=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    group_id = db.Column(db.Integer, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='active')
    last_login = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=lambda: datetime.now(timezone.utc))

    def set_password(self, password):
        """
        Hash and store the password.

        Uses werkzeug's generate_password_hash for secure hashing.

        Args:
            password: Plain text password to hash and store
        """
        self.password_hash = generate_password_hash(password, method="pbkdf2:sha256")

    def check_password(self, password):
        """
        Verify a password against the stored hash.

        Args:
            password: Plain text password to verify

        Returns:
            True if password matches, False otherwise
        """
        return check_password_hash(self.password_hash, password)

    @property
    def is_active(self):
        """Only active accounts can log in."""
        return self.status == 'active'

    def get_user_id(self):
        """User id as expected by the OAuth authorization server."""
        return self.id

    def to_dict(self):
        """
        Serialize the user to a dictionary for API responses.

        Returns:
            Dictionary containing user fields (without the password hash)
        """
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'group_id': self.group_id,
            'status': self.status,
            'last_login': self.last_login.isoformat() if self.last_login else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self):
        """String representation for debugging."""
        return f'<User {self.email}>'
