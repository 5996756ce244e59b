"""Shared fixtures for results source tests."""

import json

import pytest


def make_html(*json_ld: dict) -> bytes:
    """Wrap JSON-LD blocks in a minimal results page."""
    scripts = "\n".join(
        f'<script type="application/ld+json">{json.dumps(block)}</script>'
        for block in json_ld
    )
    return (
        f"<html><head><title>Results</title>{scripts}</head>"
        f"<body><h1>Results</h1></body></html>"
    ).encode("utf-8")


def make_result(place, leader, leader_bib, follower, follower_bib, scores, key="scores"):
    return {
        "placement": place,
        "dancer": {
            "leader": {"fullname": leader, "bib": leader_bib},
            "follower": {"fullname": follower, "bib": follower_bib},
        },
        key: [{"name": judge, "placement": p} for judge, p in scores.items()],
    }


@pytest.fixture
def event_data():
    """Novice finals, 3 judges, 3 couples.

                        Ada  Ben  Cy
    Marie & Suzanne      1    1    2
    Tom & Lea            2    3    1
    Hugo & Nina          3    2    3
    """
    return {
        "@context": "https://schema.org",
        "@type": "Event",
        "name": "Swing Resolution 2026",
        "category": "Novice",
        "startDate": "2026-03-14",
        "location": {"name": "Grand Hotel", "country": "France"},
        "calculation_model": "RPSS",
        "result": [
            make_result(1, "Marie Kade", 101, "Suzanne Guyon", 201,
                        {"Ada": 1, "Ben": 1, "Cy": 2}),
            make_result(2, "Tom Berg", 102, "Lea Roux", 202,
                        {"Ada": 2, "Ben": 3, "Cy": 1}),
            make_result(3, "Hugo Vidal", 103, "Nina Petit", 203,
                        {"Ada": 3, "Ben": 2, "Cy": 3}),
        ],
    }


@pytest.fixture
def results_html(event_data):
    breadcrumbs = {"@context": "https://schema.org", "@type": "BreadcrumbList"}
    return make_html(breadcrumbs, event_data)
