"""Pytest configuration and shared fixtures."""

import copy
from typing import Any, Dict

import numpy as np
import pytest
from PIL import Image

from locked_preview.core.domain import BlurParameters
from locked_preview.core.loader import PlaceholderLoader
from locked_preview.service.pipeline import PreviewService


@pytest.fixture(autouse=True)
def reset_engines():
    """Give every test freshly built engines and table."""
    PreviewService.reset()
    yield
    PreviewService.reset()


@pytest.fixture
def loader() -> PlaceholderLoader:
    """Loader for the packaged replacement table."""
    return PlaceholderLoader()


@pytest.fixture
def params() -> BlurParameters:
    """Default blur parameters with a small radius for fast tests."""
    return BlurParameters(
        blur_radius=3.0, visible_ratio=0.4, fade_ratio=0.25, highlight_opacity=0.35
    )


@pytest.fixture
def stripes_image() -> Image.Image:
    """Opaque 60x100 RGB image with hard horizontal and vertical stripes."""
    height, width = 100, 60
    pixels = np.zeros((height, width, 3), dtype=np.uint8)
    pixels[::4] = (255, 0, 0)
    pixels[1::4] = (0, 255, 0)
    pixels[:, ::5, 2] = 255
    return Image.fromarray(pixels)


@pytest.fixture
def rgba_image() -> Image.Image:
    """40x50 RGBA image whose top rows are fully transparent but carry colour."""
    height, width = 50, 40
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[..., 0] = 10
    pixels[..., 1] = 20
    pixels[..., 2] = 30
    pixels[25:, :, 3] = 255
    pixels[25:, ::3, :3] = (200, 100, 50)
    return Image.fromarray(pixels)


@pytest.fixture
def sample_record() -> Dict[str, Any]:
    """A fully populated resume record."""
    return {
        "title": "Senior Engineer Resume",
        "personal_info": {
            "name": "Ada Lovelace",
            "email": "ada@example.org",
            "phone": "+44 20 7946 0000",
            "address": "12 St James's Square",
            "location": "London",
            "profession": "Mathematician",
            "linkedin": "linkedin.com/in/ada",
            "github": "github.com/ada",
            "website": "ada.dev",
            "twitter": "@ada",
            "instagram": "",
            "youtube": "youtube.com/@ada",
            "facebook": "facebook.com/ada",
            "telegram": "@ada_l",
            "summary": "Wrote the first published algorithm.",
            "image": "https://assets.example.org/u/ada.png",
        },
        "professional_summary": "Analytical engine programmer with a poetic streak.",
        "experience": [
            {
                "position": "Translator",
                "company": "Taylor's Scientific Memoirs",
                "location": "London",
                "description": "Translated and annotated Menabrea's paper.",
                "start_date": "1842-10",
                "end_date": "1843-08",
                "is_current": False,
                "achievements": ["Note G", "Bernoulli numbers"],
            },
            {
                "position": "Collaborator",
                "company": "Babbage & Co",
                "location": "",
                "description": "",
                "start_date": "1833-06",
                "end_date": "",
                "is_current": True,
                "achievements": [],
            },
        ],
        "education": [
            {
                "degree": "Private tutoring",
                "institution": "University of London",
                "location": "London",
                "description": "Mathematics with Augustus De Morgan.",
                "start_date": "1840",
                "end_date": "1842",
                "is_current": False,
            }
        ],
        "projects": [
            {
                "title": "Analytical Engine programs",
                "description": "Loop constructs on punched cards.",
                "technologies": ["Punched cards", "Brass"],
                "link": "https://example.org/engine",
            },
            {
                "title": "Flyology",
                "description": "Study of flight.",
                "technologies": "Paper, wire",
                "link": "",
            },
        ],
        "skills": ["Calculus", "Algorithms", "Translation"],
        "soft_skills": ["Imagination"],
        "languages": [
            {"language": "English", "proficiency": "native"},
            {"language": "French", "proficiency": "fluent"},
        ],
        "certifications": [
            {
                "name": "Royal Society reading access",
                "issuer": "Royal Society",
                "credential_id": "RS-1843",
                "date": "1843-01",
            }
        ],
        "achievements": [
            {"title": "First program", "description": "Note G.", "date": "1843"}
        ],
        "volunteer_work": [
            {
                "position": "Patron",
                "organization": "Mechanics' Institute",
                "description": "Evening lectures.",
                "start_date": "1844",
                "end_date": "1845",
                "is_current": False,
            }
        ],
    }


@pytest.fixture
def sample_record_copy(sample_record) -> Dict[str, Any]:
    """Deep copy of the sample record for mutation checks."""
    return copy.deepcopy(sample_record)
