import re

from sqlalchemy.exc import IntegrityError

from locadora import clock
from locadora.errors import AppError
from locadora.extensions import bcrypt, db
from locadora.models import User

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class AuthService:
    @staticmethod
    def register_user(full_name, email, password):
        normalized_email = (email or "").strip().lower()
        if not (full_name or "").strip() or not normalized_email or not password:
            raise AppError("Name, email, and password are required.", 400)
        if not EMAIL_RE.match(normalized_email):
            raise AppError("Invalid email address.", 400)
        if len(password) < 6:
            raise AppError("Password must have at least 6 characters.", 400)

        if User.query.filter_by(email=normalized_email).first():
            raise AppError("Email already registered.", 409)

        user = User(
            full_name=full_name.strip(),
            email=normalized_email,
            password_hash=bcrypt.generate_password_hash(password).decode("utf-8"),
        )
        try:
            db.session.add(user)
            db.session.commit()
        except IntegrityError as exc:
            db.session.rollback()
            raise AppError("Email already registered.", 409) from exc
        return user

    @staticmethod
    def authenticate_user(email, password):
        user = User.query.filter_by(email=(email or "").strip().lower()).first()
        if not user:
            raise AppError("Invalid credentials.", 401)

        try:
            is_valid = bcrypt.check_password_hash(user.password_hash, password or "")
        except ValueError:
            is_valid = False

        if not is_valid:
            raise AppError("Invalid credentials.", 401)
        if not user.is_active_user:
            raise AppError("User account is inactive.", 403)
        user.last_login = clock.now_ms()
        db.session.commit()
        return user
