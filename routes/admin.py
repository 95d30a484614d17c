import logging
from datetime import datetime
from typing import Any, Dict, Optional

from flask import Blueprint, abort, current_app, jsonify, request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ai_engine import GenerationError, generate_blog_draft, generate_project_draft
from auth import authenticate_admin
from database import db
from models import BlogPost, PortfolioProject
from utils.text import generate_slug, normalize_tags

logger = logging.getLogger(__name__)

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")

_BLOG_FIELDS = ("title", "excerpt", "content", "cover_image", "author", "tags", "published", "meta_title", "meta_description")
_PROJECT_FIELDS = (
    "title",
    "category",
    "description",
    "image_url",
    "github_url",
    "live_url",
    "year",
    "tags",
    "sort_order",
    "visible",
)


@admin_bp.before_request
def require_admin():
    if request.method == "OPTIONS":
        return None
    authenticate_admin()
    return None


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        abort(400, description="Invalid JSON payload")
    return payload


def _tags_or_400(value: Any):
    try:
        return normalize_tags(value)
    except ValueError:
        abort(400, description="Invalid tags")


def _int_or_400(value: Any, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        abort(400, description=f"Invalid {field}")


def _commit_or_500(message: str) -> None:
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception(message)
        abort(500, description=message)


def _post_or_404(post_id: int) -> BlogPost:
    post = db.session.get(BlogPost, post_id)
    if not post:
        abort(404, description="Blog post not found")
    return post


def _project_or_404(project_id: int) -> PortfolioProject:
    project = db.session.get(PortfolioProject, project_id)
    if not project:
        abort(404, description="Project not found")
    return project


def _apply_updates(row, payload: Dict[str, Any], fields) -> None:
    # Absent and null fields keep their stored value.
    for field in fields:
        value = payload.get(field)
        if value is None:
            continue
        if field == "tags":
            value = _tags_or_400(value)
        elif field == "sort_order":
            value = _int_or_400(value, field)
        elif field in {"published", "visible"}:
            value = bool(value)
        setattr(row, field, value)
    row.updated_at = datetime.utcnow()


# Blog posts


@admin_bp.route("/blogs", methods=["GET"])
def list_blogs():
    posts = BlogPost.query.order_by(BlogPost.created_at.desc()).all()
    return jsonify([post.to_dict() for post in posts])


@admin_bp.route("/blogs", methods=["POST"])
def create_blog():
    payload = _json_body()
    title = payload.get("title")
    content = payload.get("content")
    if not isinstance(title, str) or not title.strip():
        abort(400, description="Title is required")
    if not content:
        abort(400, description="Content is required")
    title = title.strip()

    slug = generate_slug(title)
    if not slug:
        abort(400, description="Title must contain letters or digits")

    post = BlogPost(
        title=title,
        slug=slug,
        excerpt=payload.get("excerpt"),
        content=content,
        cover_image=payload.get("cover_image"),
        author=payload.get("author") or current_app.config["STUDIO_NAME"],
        tags=_tags_or_400(payload.get("tags")),
        published=bool(payload.get("published", False)),
        meta_title=payload.get("meta_title"),
        meta_description=payload.get("meta_description"),
    )
    db.session.add(post)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        logger.info("Duplicate blog slug %s", slug)
        abort(409, description="A blog post with a similar title already exists")
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to create blog post")
        abort(500, description="Failed to create blog post")
    current_app.logger.info("Blog post created id=%s slug=%s", post.id, post.slug)
    return jsonify(post.to_dict()), 201


@admin_bp.route("/blogs/<int:post_id>", methods=["PUT"])
def update_blog(post_id: int):
    post = _post_or_404(post_id)
    payload = _json_body()
    _apply_updates(post, payload, _BLOG_FIELDS)
    if isinstance(payload.get("title"), str) and payload["title"].strip():
        post.slug = generate_slug(payload["title"]) or post.slug
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        abort(409, description="A blog post with a similar title already exists")
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Failed to update blog post")
        abort(500, description="Failed to update blog post")
    return jsonify(post.to_dict())


@admin_bp.route("/blogs/<int:post_id>", methods=["DELETE"])
def delete_blog(post_id: int):
    post = _post_or_404(post_id)
    db.session.delete(post)
    _commit_or_500("Failed to delete blog post")
    current_app.logger.info("Blog post deleted id=%s", post_id)
    return jsonify({"success": True})


@admin_bp.route("/blogs/<int:post_id>", methods=["PATCH"])
@admin_bp.route("/blogs/<int:post_id>/toggle-publish", methods=["PATCH"])
def toggle_publish(post_id: int):
    post = _post_or_404(post_id)
    post.published = not post.published
    post.updated_at = datetime.utcnow()
    _commit_or_500("Failed to toggle publish status")
    return jsonify(post.to_dict())


# Portfolio projects


@admin_bp.route("/projects", methods=["GET"])
def list_projects():
    projects = PortfolioProject.query.order_by(
        PortfolioProject.sort_order.asc(), PortfolioProject.created_at.desc()
    ).all()
    return jsonify([project.to_dict() for project in projects])


@admin_bp.route("/projects", methods=["POST"])
def create_project():
    payload = _json_body()
    title = payload.get("title")
    if not isinstance(title, str) or not title.strip():
        abort(400, description="Title is required")

    project = PortfolioProject(
        title=title,
        category=payload.get("category"),
        description=payload.get("description"),
        image_url=payload.get("image_url") or "",
        github_url=payload.get("github_url") or "",
        live_url=payload.get("live_url") or "",
        year=payload.get("year") or str(datetime.utcnow().year),
        tags=_tags_or_400(payload.get("tags")),
        sort_order=_int_or_400(payload.get("sort_order") or 0, "sort_order"),
        visible=payload.get("visible") is not False,
    )
    db.session.add(project)
    _commit_or_500("Failed to create project")
    current_app.logger.info("Project created id=%s", project.id)
    return jsonify(project.to_dict()), 201


@admin_bp.route("/projects/<int:project_id>", methods=["PUT"])
def update_project(project_id: int):
    project = _project_or_404(project_id)
    _apply_updates(project, _json_body(), _PROJECT_FIELDS)
    _commit_or_500("Failed to update project")
    return jsonify(project.to_dict())


@admin_bp.route("/projects/<int:project_id>", methods=["DELETE"])
def delete_project(project_id: int):
    project = _project_or_404(project_id)
    db.session.delete(project)
    _commit_or_500("Failed to delete project")
    return jsonify({"success": True})


@admin_bp.route("/projects/<int:project_id>/toggle-visible", methods=["PATCH"])
def toggle_visible(project_id: int):
    project = _project_or_404(project_id)
    project.visible = not project.visible
    project.updated_at = datetime.utcnow()
    _commit_or_500("Failed to toggle visibility")
    return jsonify(project.to_dict())


# Content generation


def _prompt_or_400(payload: Dict[str, Any]) -> str:
    prompt = payload.get("prompt")
    if not isinstance(prompt, str) or not prompt.strip():
        abort(400, description="Prompt is required")
    return prompt


def _optional_str(payload: Dict[str, Any], key: str) -> Optional[str]:
    value = payload.get(key)
    return value if isinstance(value, str) and value else None


def _generation_failed(exc: GenerationError):
    return jsonify({"error": exc.message}), exc.status


@admin_bp.route("/generate-project", methods=["POST"])
def generate_project():
    payload = _json_body()
    prompt = _prompt_or_400(payload)
    try:
        draft = generate_project_draft(
            prompt,
            image_url=_optional_str(payload, "image_url"),
            github_url=_optional_str(payload, "github_url"),
            live_url=_optional_str(payload, "live_url"),
        )
    except GenerationError as exc:
        return _generation_failed(exc)
    return jsonify(draft)


@admin_bp.route("/generate", methods=["POST"])
def generate():
    if request.args.get("type") == "project":
        return generate_project()
    prompt = _prompt_or_400(_json_body())
    try:
        draft = generate_blog_draft(prompt)
    except GenerationError as exc:
        return _generation_failed(exc)
    return jsonify(draft)
