"""
User controller for handling membership HTTP requests.
"""

from flask import Blueprint, jsonify, request

from lending.controllers.serializers import user_to_dict
from lending.core.api_utils import api_response, error_response
from lending.core.exceptions import LendingError
from lending.db.session import SessionLocal
from lending.domain.entities import MembershipStatus, User
from lending.repositories.user_repo import UserRepository
from lending.services.user_service import UserService

user_bp = Blueprint("users", __name__, url_prefix="/users")


@user_bp.route("/", methods=["GET"])
def list_users():
    db = SessionLocal()
    try:
        users = UserService(UserRepository(db)).list_users()
        return jsonify([user_to_dict(u) for u in users]), 200
    finally:
        db.close()


@user_bp.route("/<user_id>", methods=["GET"])
def get_user(user_id):
    db = SessionLocal()
    try:
        user = UserService(UserRepository(db)).find_user_by_id(user_id)
        if not user:
            return api_response(False, "User not found", None, 404)
        return jsonify(user_to_dict(user)), 200
    finally:
        db.close()


@user_bp.route("/", methods=["POST"])
def add_user():
    data = request.get_json(silent=True) or {}
    try:
        user = User(
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            email=data.get("email", ""),
            phone=data.get("phone"),
            address=data.get("address"),
            status=data.get("status", MembershipStatus.ACTIVE.value),
        )
    except ValueError as e:
        return api_response(False, str(e), None, 400)

    db = SessionLocal()
    try:
        created = UserService(UserRepository(db)).add_user(user)
        return jsonify(user_to_dict(created)), 201
    except LendingError as e:
        return error_response(e)
    finally:
        db.close()


@user_bp.route("/<user_id>", methods=["PUT"])
def update_user(user_id):
    data = request.get_json(silent=True) or {}
    db = SessionLocal()
    try:
        service = UserService(UserRepository(db))
        existing = service.find_user_by_id(user_id)
        if not existing:
            return api_response(False, "User not found", None, 404)
        try:
            updated = User(
                user_id=existing.user_id,
                registration_date=existing.registration_date,
                first_name=data.get("first_name", existing.first_name),
                last_name=data.get("last_name", existing.last_name),
                email=data.get("email", existing.email),
                phone=data.get("phone", existing.phone),
                address=data.get("address", existing.address),
                status=data.get("status", existing.status.value),
            )
        except ValueError as e:
            return api_response(False, f"Update failed: {e}", None, 400)
        service.update_user(updated)
        return api_response(True, "User updated", user_to_dict(updated))
    except LendingError as e:
        return error_response(e)
    finally:
        db.close()


@user_bp.route("/<user_id>", methods=["DELETE"])
def delete_user(user_id):
    """Delete a member. Their borrowing history is kept."""
    db = SessionLocal()
    try:
        if not UserService(UserRepository(db)).delete_user(user_id):
            return api_response(False, "User not found", None, 404)
        return api_response(True, "User deleted")
    finally:
        db.close()
