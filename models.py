from datetime import datetime
from typing import Any, Dict, Optional

from database import db

DEFAULT_AUTHOR = "Red Dot Studio"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


class BlogPost(db.Model):
    __tablename__ = "blog_posts"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(500), nullable=False)
    slug = db.Column(db.String(500), unique=True, nullable=False, index=True)
    excerpt = db.Column(db.Text, nullable=True)
    content = db.Column(db.Text, nullable=False)
    cover_image = db.Column(db.String(1000), nullable=True)
    author = db.Column(db.String(200), nullable=True, default=DEFAULT_AUTHOR)
    tags = db.Column(db.JSON, nullable=False, default=list)
    published = db.Column(db.Boolean, nullable=False, default=False, index=True)
    meta_title = db.Column(db.String(200), nullable=True)
    meta_description = db.Column(db.String(500), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_summary_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "excerpt": self.excerpt,
            "cover_image": self.cover_image,
            "author": self.author,
            "tags": list(self.tags or []),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_summary_dict()
        data.update(
            {
                "content": self.content,
                "published": bool(self.published),
                "meta_title": self.meta_title,
                "meta_description": self.meta_description,
            }
        )
        return data


class PortfolioProject(db.Model):
    __tablename__ = "portfolio_projects"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(500), nullable=False)
    category = db.Column(db.String(300), nullable=True)
    description = db.Column(db.Text, nullable=True)
    image_url = db.Column(db.String(1000), nullable=True)
    github_url = db.Column(db.String(1000), nullable=True)
    live_url = db.Column(db.String(1000), nullable=True)
    year = db.Column(db.String(10), nullable=True)
    tags = db.Column(db.JSON, nullable=False, default=list)
    sort_order = db.Column(db.Integer, nullable=False, default=0)
    visible = db.Column(db.Boolean, nullable=False, default=True, index=True)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
    __table_args__ = (db.Index("idx_projects_order", "sort_order", "created_at"),)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "image_url": self.image_url,
            "github_url": self.github_url,
            "live_url": self.live_url,
            "year": self.year,
            "tags": list(self.tags or []),
            "sort_order": self.sort_order,
            "visible": bool(self.visible),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
