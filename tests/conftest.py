from datetime import datetime

import pytest

from app import create_app
from auth import issue_token
from config import TestConfig
from database import db
from models import BlogPost, PortfolioProject


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers(app):
    token = issue_token(app.config["JWT_SECRET"], 1)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_post(app):
    def _make(**kwargs):
        defaults = {
            "title": "Hello World",
            "slug": "hello-world",
            "content": "# Hello\n\nSome **bold** text.",
            "excerpt": "A greeting",
            "published": True,
            "tags": ["intro"],
        }
        defaults.update(kwargs)
        post = BlogPost(**defaults)
        db.session.add(post)
        db.session.commit()
        return post

    return _make


@pytest.fixture
def make_project(app):
    def _make(**kwargs):
        defaults = {
            "title": "LinkMate",
            "category": "Web",
            "description": "Portfolio builder",
            "year": "2025",
            "sort_order": 0,
            "visible": True,
            "tags": [],
            "created_at": datetime(2024, 1, 1),
        }
        defaults.update(kwargs)
        project = PortfolioProject(**defaults)
        db.session.add(project)
        db.session.commit()
        return project

    return _make
