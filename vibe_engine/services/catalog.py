"""
Static catalogues offered to the builder UI: starter component prompts
and the model identifiers users can pick from.
"""
from typing import Any, Dict, List, Optional

from vibe_engine.config import settings


# Starter prompts for common UI pieces
COMPONENT_TEMPLATES = {
    "login-form": {
        "id": "login-form",
        "name": "Login Form",
        "category": "Authentication",
        "prompt": "Create a modern login form with email/password fields and social auth buttons (Google, GitHub)",
        "preview": "Modern login with social auth"
    },
    "dashboard": {
        "id": "dashboard",
        "name": "Dashboard",
        "category": "Layouts",
        "prompt": "Build a responsive dashboard with sidebar navigation, analytics cards, and charts",
        "preview": "Analytics dashboard layout"
    },
    "product-card": {
        "id": "product-card",
        "name": "Product Card",
        "category": "E-commerce",
        "prompt": "Generate an e-commerce product card with image, title, price, rating, and add to cart button",
        "preview": "E-commerce product display"
    },
    "user-profile": {
        "id": "user-profile",
        "name": "User Profile",
        "category": "User",
        "prompt": "Create a user profile page with avatar, bio, stats, and edit functionality",
        "preview": "User profile with stats"
    },
    "navbar": {
        "id": "navbar",
        "name": "Navigation Bar",
        "category": "Navigation",
        "prompt": "Make a responsive navbar with logo, menu items, user dropdown, and mobile hamburger",
        "preview": "Responsive navigation"
    },
    "contact-form": {
        "id": "contact-form",
        "name": "Contact Form",
        "category": "Forms",
        "prompt": "Create a contact form with name, email, subject, message fields and validation",
        "preview": "Contact form with validation"
    },
    "pricing-table": {
        "id": "pricing-table",
        "name": "Pricing Table",
        "category": "Marketing",
        "prompt": "Design a pricing table with three tiers, feature lists, and a highlighted recommended plan",
        "preview": "Three-tier pricing"
    },
    "data-table": {
        "id": "data-table",
        "name": "Data Table",
        "category": "Data",
        "prompt": "Build a data table with sorting, filtering, pagination, and row actions",
        "preview": "Interactive data table"
    },
}


AVAILABLE_MODELS = [
    {"id": "gpt-4", "name": "GPT-4", "provider": "OpenAI"},
    {"id": "gpt-3.5-turbo", "name": "GPT-3.5 Turbo", "provider": "OpenAI"},
    {"id": "claude-3-opus", "name": "Claude 3 Opus", "provider": "Anthropic"},
    {"id": "claude-3-sonnet", "name": "Claude 3 Sonnet", "provider": "Anthropic"},
]


def get_available_templates(category: Optional[str] = None) -> List[Dict[str, Any]]:
    """List component templates, optionally narrowed to one category."""
    templates = list(COMPONENT_TEMPLATES.values())
    if category:
        wanted = category.strip().lower()
        templates = [t for t in templates if t["category"].lower() == wanted]
    return [dict(t) for t in templates]


def get_template(template_id: str) -> Optional[Dict[str, Any]]:
    template = COMPONENT_TEMPLATES.get(template_id)
    return dict(template) if template else None


def get_available_models() -> List[Dict[str, Any]]:
    return [
        {**model, "default": model["id"] == settings.DEFAULT_MODEL}
        for model in AVAILABLE_MODELS
    ]
