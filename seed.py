import logging

from flask import current_app

from database import db
from models import PortfolioProject

logger = logging.getLogger(__name__)

DEFAULT_PROJECTS = [
    {
        "title": "LinkMate",
        "category": "Full-Stack Web Application",
        "description": (
            "Built a modern portfolio builder with customizable sections, drag-and-drop link management, "
            "and real-time analytics tracking link, social, and project engagement. Boosted performance "
            "by 40% through efficient caching and optimized data flows."
        ),
        "image_url": "https://images.unsplash.com/photo-1551288049-bebda4e38f71?q=80&w=1200&auto=format&fit=crop",
        "year": "2025",
    },
    {
        "title": "AI-View",
        "category": "AI-Powered Web Application",
        "description": (
            "Engineered a smart interview simulation platform using Gemini AI to generate tailored questions "
            "based on role and company. Built post-interview analytics to score responses and deliver "
            "personalized improvement feedback."
        ),
        "image_url": "https://cdn.analyticsvidhya.com/wp-content/uploads/2024/09/AI-interview-questions-scaled.webp",
        "year": "2025",
    },
    {
        "title": "OpenWork",
        "category": "E-Commerce & Brand Strategy",
        "description": (
            "We are building OpenWork, a decentralized work protocol redefining the way people collaborate "
            "on the internet. Free from central authority, OpenWork introduces a new paradigm of work "
            "engagement and management."
        ),
        "image_url": "https://app.openwork.technology/about-logo.svg",
        "year": "2024",
    },
]


def seed_database() -> int:
    """Idempotent bootstrap seeding of the default portfolio."""
    if not current_app.config.get("SEED_PORTFOLIO", False):
        return 0
    if PortfolioProject.query.first() is not None:
        return 0

    for order, project in enumerate(DEFAULT_PROJECTS):
        db.session.add(PortfolioProject(sort_order=order, visible=True, tags=[], **project))
    db.session.commit()
    logger.info("Seeded %d portfolio projects", len(DEFAULT_PROJECTS))
    return len(DEFAULT_PROJECTS)
