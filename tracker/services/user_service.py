"""
User Service - account creation and password authentication.
"""

from email_validator import EmailNotValidError, validate_email

from tracker.models import db
from tracker.models.auth import User
from tracker.utils.crypto import hash_password, verify_password


class UserServiceError(Exception):
    """Custom exception for user service errors."""
    def __init__(self, message, status_code=400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def get_user_by_id(user_id: int) -> User | None:
    return db.session.get(User, user_id)


def get_user_by_username(username: str) -> User | None:
    return User.query.filter_by(username=username).first()


def create_user(
    username: str,
    password: str,
    email: str = None,
    first_name: str = None,
    last_name: str = None,
) -> User:
    """Create a local user. Raises UserServiceError on invalid input or duplicates."""
    username = (username or "").strip()
    if not username:
        raise UserServiceError("Username is required")
    if not password:
        raise UserServiceError("Password is required")
    if get_user_by_username(username):
        raise UserServiceError(f"User already exists: {username}", 409)

    if email:
        try:
            email = validate_email(email, check_deliverability=False).normalized
        except EmailNotValidError as e:
            raise UserServiceError(f"Invalid email: {e}")
        if User.query.filter_by(email=email).first():
            raise UserServiceError(f"Email already in use: {email}", 409)

    user = User(
        username=username,
        email=email or None,
        first_name=first_name,
        last_name=last_name,
        password_hash=hash_password(password),
    )
    db.session.add(user)
    db.session.commit()
    return user


def authenticate_user(username: str, password: str) -> User:
    """Authenticate with username + password. Returns User on success."""
    user = get_user_by_username(username)
    if not user or not verify_password(password, user.password_hash):
        raise UserServiceError("Invalid credentials", 401)
    return user
