import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
from flask import current_app
from google import genai
from google.genai import types

from utils.markdown_render import render_markdown
from utils.text import normalize_tags

logger = logging.getLogger(__name__)

STOCK_COVER_IMAGE = "https://images.unsplash.com/photo-1460925895917-afdab827c52f?q=80&w=1200&auto=format&fit=crop"

BLOG_SYSTEM_PROMPT = """You are a world-class blog writer for {studio}, a strategy-led design studio based in Bangalore, India. Write in a confident, professional, clear tone. Use Markdown formatting.

When given a topic, generate a complete blog post with:
1. A compelling title (on the first line, prefixed with TITLE: )
2. A brief excerpt/summary (on the second line, prefixed with EXCERPT: )
3. Suggested tags (on the third line, prefixed with TAGS: comma separated)
4. A suggested cover image search term (on the fourth line, prefixed with COVER: )
5. An SEO meta title (on the fifth line, prefixed with META_TITLE: )
6. An SEO meta description (on the sixth line, prefixed with META_DESC: )
7. Then a blank line followed by the full blog content in Markdown.

The content should be 600-1200 words, insightful, actionable, and relevant to design, branding, web development, or business growth. Use headers (##, ###), bold text, lists, and blockquotes for readability."""

PROJECT_SYSTEM_PROMPT = """You are a portfolio copywriter for {studio}, a strategy-led design studio in Bangalore, India. Given context about a project (optionally with a GitHub repo link and live URL), generate professional portfolio details.

Respond in exactly this format:
TITLE: <project title, short, punchy, brandable>
CATEGORY: <type of work, e.g. "Web Design & Development", "Brand Identity", "Product Design & UI/UX", "E-Commerce & Brand Strategy">
DESCRIPTION: <1-2 sentence impact-focused description with a measurable result or strong value statement>
TAGS: <3-5 comma-separated technology/skill tags>
YEAR: <the year, default to current year if unknown>

Keep it concise, results-oriented, and matching a premium design studio tone."""

_BLOG_FIELDS = ("TITLE:", "EXCERPT:", "TAGS:", "COVER:", "META_TITLE:", "META_DESC:")
_PROJECT_FIELDS = ("TITLE:", "CATEGORY:", "DESCRIPTION:", "TAGS:", "YEAR:")


class GenerationError(Exception):
    """Content generation failed; carries the HTTP status to report."""

    def __init__(self, status: int, message: str) -> None:
        super().__init__(message)
        self.status = status
        self.message = message


def _current_year() -> str:
    return str(datetime.utcnow().year)


def _call_model(system_prompt: str, prompt: str, temperature: float, max_tokens: int) -> str:
    api_key = current_app.config.get("AI_API_KEY")
    if not api_key:
        raise GenerationError(500, "AI API key not configured")
    timeout_ms = int(float(current_app.config.get("AI_TIMEOUT_SECONDS", 15)) * 1000)
    try:
        client = genai.Client(api_key=api_key, http_options=types.HttpOptions(timeout=timeout_ms))
        config = types.GenerateContentConfig(
            system_instruction=system_prompt,
            temperature=temperature,
            max_output_tokens=max_tokens,
            top_p=1.0,
        )
        resp = client.models.generate_content(
            model=current_app.config.get("AI_MODEL", "gemini-2.5-flash"),
            contents=[prompt],
            config=config,
        )
    except httpx.TimeoutException as exc:
        logger.exception("Content generation timed out")
        raise GenerationError(504, "AI generation timed out") from exc
    except Exception as exc:  # noqa: BLE001
        logger.exception("Content generation failed")
        raise GenerationError(500, "AI generation failed") from exc
    return (getattr(resp, "text", None) or "") if resp is not None else ""


def _field(line: str, prefix: str) -> str:
    return line[len(prefix):].strip()


def parse_blog_draft(text: str) -> Dict[str, Any]:
    """Split a structured model reply into blog post fields."""
    values = {prefix: "" for prefix in _BLOG_FIELDS}
    content_lines: List[str] = []
    content_start = 0

    lines = text.split("\n")
    for i, raw in enumerate(lines):
        line = raw.strip()
        prefix = next((p for p in _BLOG_FIELDS if line.startswith(p)), None)
        if prefix:
            values[prefix] = _field(line, prefix)
            if prefix == "META_DESC:":
                content_start = i + 1
        elif values["TITLE:"] and not content_lines and line == "":
            content_start = i + 1
        elif content_start > 0 and i >= content_start:
            content_lines.append(raw)

    content = "\n".join(content_lines)
    if not content.strip():
        content = text
    content = content.strip()

    title = values["TITLE:"]
    excerpt = values["EXCERPT:"]
    return {
        "title": title or "Untitled Post",
        "excerpt": excerpt,
        "tags": normalize_tags(values["TAGS:"]),
        "cover_image": STOCK_COVER_IMAGE if values["COVER:"] else "",
        "meta_title": values["META_TITLE:"] or title,
        "meta_description": values["META_DESC:"] or excerpt,
        "content": content,
        "content_html": render_markdown(content),
    }


def parse_project_draft(
    text: str,
    image_url: Optional[str] = None,
    github_url: Optional[str] = None,
    live_url: Optional[str] = None,
) -> Dict[str, Any]:
    values = {prefix: "" for prefix in _PROJECT_FIELDS}
    for raw in text.split("\n"):
        line = raw.strip()
        for prefix in _PROJECT_FIELDS:
            if line.startswith(prefix):
                values[prefix] = _field(line, prefix)
                break

    return {
        "title": values["TITLE:"] or "Untitled Project",
        "category": values["CATEGORY:"],
        "description": values["DESCRIPTION:"],
        "tags": normalize_tags(values["TAGS:"]),
        "year": values["YEAR:"] or _current_year(),
        "image_url": image_url or "",
        "github_url": github_url or "",
        "live_url": live_url or "",
    }


def generate_blog_draft(prompt: str) -> Dict[str, Any]:
    studio = current_app.config.get("STUDIO_NAME", "Red Dot Studio")
    text = _call_model(BLOG_SYSTEM_PROMPT.format(studio=studio), prompt, temperature=0.6, max_tokens=4096)
    draft = parse_blog_draft(text)
    logger.info("Generated blog draft title=%r chars=%d", draft["title"], len(draft["content"]))
    return draft


def generate_project_draft(
    prompt: str,
    image_url: Optional[str] = None,
    github_url: Optional[str] = None,
    live_url: Optional[str] = None,
) -> Dict[str, Any]:
    studio = current_app.config.get("STUDIO_NAME", "Red Dot Studio")
    user_prompt = f"Project info: {prompt}"
    if github_url:
        user_prompt += f"\nGitHub: {github_url}"
    if live_url:
        user_prompt += f"\nLive: {live_url}"
    text = _call_model(PROJECT_SYSTEM_PROMPT.format(studio=studio), user_prompt, temperature=0.5, max_tokens=1024)
    draft = parse_project_draft(text, image_url=image_url, github_url=github_url, live_url=live_url)
    logger.info("Generated project draft title=%r", draft["title"])
    return draft
