import logging
import sys
from dataclasses import dataclass

from flask import Blueprint, Flask, current_app, jsonify, request
from flask_login import current_user, login_required
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from accounts import AccountService
from auth import clear_token_cookie, init_gate, set_token_cookie
from config import Settings
from errors import ConfigError, NotFound, TaskFlowError, ValidationError
from extensions import bcrypt, cors, db
from logging_setup import setup_logging
from passwords import LOG_ROUNDS
from tasks import TaskRepository
from tokens import TokenCodec
from users import UserStore

__version__ = "1.0.0"

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__)


@dataclass
class Services:
    settings: Settings
    codec: TokenCodec
    users: UserStore
    tasks: TaskRepository
    accounts: AccountService


def services():
    return current_app.extensions["taskflow"]


def json_body():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise ValidationError("Request body must be a JSON object")
    return payload


def ok(message=None, status=200, **fields):
    body = {"success": True}
    if message:
        body["message"] = message
    body.update(fields)
    return jsonify(body), status


@api.route("/")  # Health check
def health():
    return ok("Task Management API is running", version=__version__)


# --- Authentication ---

@api.route("/auth/register", methods=["POST"])
def register():
    payload = json_body()
    user, token = services().accounts.register(payload.get("email"), payload.get("password"))
    response, status = ok("User created successfully", 201, data={"user": user.to_dict()})
    set_token_cookie(response, token, services().settings.is_production)
    return response, status


@api.route("/auth/login", methods=["POST"])
def login():
    payload = json_body()
    user, token = services().accounts.login(payload.get("email"), payload.get("password"))
    response, status = ok("Login successful", data={"user": user.to_dict()})
    set_token_cookie(response, token, services().settings.is_production)
    return response, status


@api.route("/auth/logout", methods=["POST"])
def logout():
    # Stateless: the token stays valid until it expires, the client just forgets it.
    response, status = ok("Logout successful")
    clear_token_cookie(response, services().settings.is_production)
    return response, status


@api.route("/auth/delete-account", methods=["DELETE"])
@login_required
def delete_account():
    services().accounts.delete_account(current_user.id)
    response, status = ok("Account and all associated data deleted successfully")
    clear_token_cookie(response, services().settings.is_production)
    return response, status


# --- Tasks (owner is always current_user.id) ---

@api.route("/tasks", methods=["GET"])
@login_required
def list_tasks():
    tasks = services().tasks.list(current_user.id)
    return ok(count=len(tasks), data=[t.to_dict() for t in tasks])


@api.route("/tasks/<task_id>", methods=["GET"])
@login_required
def get_task(task_id):
    task = services().tasks.get_by_id(current_user.id, task_id)
    if task is None:
        raise NotFound(f"task {task_id} for {current_user.id}")
    return ok(data=task.to_dict())


@api.route("/tasks", methods=["POST"])
@login_required
def create_task():
    payload = json_body()
    task = services().tasks.create(
        current_user.id,
        payload.get("title"),
        payload.get("description"),
        payload.get("status"),
    )
    return ok("Task created successfully", 201, data=task.to_dict())


@api.route("/tasks/<task_id>", methods=["PUT"])
@login_required
def update_task(task_id):
    task = services().tasks.update(current_user.id, task_id, json_body())
    if task is None:
        raise NotFound(f"task {task_id} for {current_user.id}")
    return ok("Task updated successfully", data=task.to_dict())


@api.route("/tasks/<task_id>", methods=["DELETE"])
@login_required
def delete_task(task_id):
    task = services().tasks.delete_by_id(current_user.id, task_id)
    if task is None:
        raise NotFound(f"task {task_id} for {current_user.id}")
    return ok("Task deleted successfully", data=task.to_dict())


# --- Errors ---

def handle_app_error(error):
    if error.status_code >= 500:
        logger.error("Internal error: %s", error.detail, exc_info=error)
    body = {"success": False, "message": error.public_message}
    if isinstance(error, ValidationError):
        body["errors"] = error.errors
    return jsonify(body), error.status_code


def handle_http_error(error):
    return jsonify(success=False, message=error.name), error.code


def handle_unexpected(error):
    if isinstance(error, SQLAlchemyError):
        db.session.rollback()
    logger.exception("Unhandled error on %s %s", request.method, request.path)
    return jsonify(success=False, message="Internal server error"), 500


def create_app(settings=None, config=None):
    """Build the application.

    ``settings`` defaults to ``Settings.from_env()``. ``config`` entries are
    applied on top of the derived Flask config (tests use it to cheapen
    bcrypt).
    """
    if settings is None:
        settings = Settings.from_env()

    app = Flask(__name__)
    app.config["SECRET_KEY"] = settings.session_secret
    app.config["SQLALCHEMY_DATABASE_URI"] = settings.database_url
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["BCRYPT_LOG_ROUNDS"] = LOG_ROUNDS
    app.config["BCRYPT_HANDLE_LONG_PASSWORDS"] = True
    app.config.update(config or {})

    # Initialize extensions
    db.init_app(app)
    bcrypt.init_app(app)
    init_gate(app)
    if settings.cors_origins:
        cors.init_app(app, origins=list(settings.cors_origins), supports_credentials=True)

    codec = TokenCodec(settings.jwt_secret)
    users = UserStore(db.session)
    tasks = TaskRepository(db.session)
    app.extensions["taskflow"] = Services(
        settings=settings,
        codec=codec,
        users=users,
        tasks=tasks,
        accounts=AccountService(users, tasks, codec),
    )

    app.register_blueprint(api)
    app.register_error_handler(TaskFlowError, handle_app_error)
    app.register_error_handler(HTTPException, handle_http_error)
    app.register_error_handler(Exception, handle_unexpected)

    with app.app_context():
        db.create_all()
        logger.info("Store ready at %s", db.engine.url.render_as_string(hide_password=True))
    return app


def main():
    try:
        settings = Settings.from_env()
    except ConfigError as exc:
        setup_logging()
        logger.error("Configuration error: %s", exc)
        sys.exit(1)

    setup_logging(settings.log_level)
    try:
        app = create_app(settings)
    except SQLAlchemyError:
        logger.exception("Could not connect to the store")
        sys.exit(1)

    logger.info("Server is running on port %d", settings.port)
    app.run(host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
