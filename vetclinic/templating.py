"""Jinja2 environment shared by the server-rendered pages"""

from pathlib import Path
from urllib.parse import urlencode

from fastapi.templating import Jinja2Templates

from .shared import status_manager
from .utils.date_calculator import format_date_for_display, format_for_input

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def page_url(request, page: int) -> str:
    """Current URL with ``page`` replaced, other query parameters kept"""
    params = dict(request.query_params)
    params["page"] = str(page)
    return f"{request.url.path}?{urlencode(params)}"


templates.env.filters["display_date"] = format_date_for_display
templates.env.filters["input_date"] = format_for_input
templates.env.globals.update(
    page_url=page_url,
    status_badge=status_manager.status_badge,
    HEALTH=status_manager.HEALTH,
    EXAM=status_manager.EXAM,
    ANIMAL=status_manager.ANIMAL,
    health_options=status_manager.get_health_status_options,
    exam_options=status_manager.get_exam_status_options,
    animal_options=status_manager.get_animal_type_options,
)
