import hmac
import logging
from datetime import timezone
from typing import Any, Dict
from xml.sax.saxutils import escape as xml_escape

from flask import Blueprint, Response, abort, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from auth import issue_token
from database import db
from models import BlogPost, PortfolioProject
from utils.markdown_render import render_markdown

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__, url_prefix="/api")


def _published_post_or_404(slug: str, description: str = "Blog post not found") -> BlogPost:
    post = BlogPost.query.filter_by(slug=slug, published=True).first()
    if not post:
        abort(404, description=description)
    return post


def _db_failure(message: str):
    db.session.rollback()
    logger.exception(message)
    abort(500, description=message)


def _base_url() -> str:
    forwarded = request.headers.get("X-Forwarded-Host")
    if forwarded:
        return f"https://{forwarded}"
    return request.host_url.rstrip("/")


def _isoformat_utc(value) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@api_bp.route("/health", methods=["GET"])
def health():
    return jsonify({"status": "ok"})


@api_bp.route("/auth/login", methods=["POST"])
def login():
    payload = request.get_json(silent=True) or {}
    password = payload.get("password")
    expected = current_app.config["ADMIN_PASSWORD"]
    if isinstance(password, str) and hmac.compare_digest(password.encode(), expected.encode()):
        token = issue_token(current_app.config["JWT_SECRET"], current_app.config["JWT_EXPIRES_DAYS"])
        logging.getLogger("security").info("Admin login ip=%s", request.remote_addr)
        return jsonify({"token": token})
    logging.getLogger("security").info("Failed admin login ip=%s", request.remote_addr)
    abort(401, description="Invalid password")


@api_bp.route("/blogs", methods=["GET"])
def list_blogs():
    try:
        posts = BlogPost.query.filter_by(published=True).order_by(BlogPost.created_at.desc()).all()
    except SQLAlchemyError:
        _db_failure("Failed to fetch blogs")
    return jsonify([post.to_summary_dict() for post in posts])


@api_bp.route("/blogs/<slug>", methods=["GET"])
def get_blog(slug: str):
    try:
        post = _published_post_or_404(slug)
    except SQLAlchemyError:
        _db_failure("Failed to fetch blog post")
    data = post.to_dict()
    data["content_html"] = render_markdown(post.content)
    return jsonify(data)


@api_bp.route("/blogs/<slug>/jsonld", methods=["GET"])
def blog_jsonld(slug: str):
    post = _published_post_or_404(slug, description="Not found")
    studio = current_app.config["STUDIO_NAME"]
    json_ld: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": post.meta_title or post.title,
        "description": post.meta_description or post.excerpt,
        "image": post.cover_image,
        "author": {"@type": "Organization", "name": post.author or studio},
        "datePublished": post.created_at.isoformat() if post.created_at else None,
        "dateModified": post.updated_at.isoformat() if post.updated_at else None,
        "publisher": {"@type": "Organization", "name": studio},
    }
    return jsonify(json_ld)


@api_bp.route("/projects", methods=["GET"])
def list_projects():
    try:
        projects = (
            PortfolioProject.query.filter_by(visible=True)
            .order_by(PortfolioProject.sort_order.asc(), PortfolioProject.created_at.desc())
            .all()
        )
    except SQLAlchemyError:
        _db_failure("Failed to fetch projects")
    return jsonify([project.to_dict() for project in projects])


@api_bp.route("/sitemap.xml", methods=["GET"])
def sitemap():
    try:
        posts = (
            BlogPost.query.with_entities(BlogPost.slug, BlogPost.updated_at)
            .filter_by(published=True)
            .order_by(BlogPost.updated_at.desc())
            .all()
        )
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception("Sitemap generation failed")
        return Response("Error generating sitemap", status=500, mimetype="text/plain")

    base_url = xml_escape(_base_url())
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
        "  <url>",
        f"    <loc>{base_url}/</loc>",
        "    <changefreq>weekly</changefreq>",
        "    <priority>1.0</priority>",
        "  </url>",
        "  <url>",
        f"    <loc>{base_url}/blog</loc>",
        "    <changefreq>daily</changefreq>",
        "    <priority>0.9</priority>",
        "  </url>",
    ]
    for slug, updated_at in posts:
        parts.extend(
            [
                "  <url>",
                f"    <loc>{base_url}/blog/{xml_escape(slug)}</loc>",
                f"    <lastmod>{_isoformat_utc(updated_at)}</lastmod>",
                "    <changefreq>weekly</changefreq>",
                "    <priority>0.8</priority>",
                "  </url>",
            ]
        )
    parts.append("</urlset>")
    return Response("\n".join(parts), mimetype="application/xml")
