"""
Test the HTML page generators.
"""

import datetime

from assetserve._pages import render_page, render_home, iso_now, MISSING_PAGE_HTML


def test_render_page():
    html = render_page("Foo", "<p>bar</p>", styles=["a.css"], scripts=["b.js", "c.js"])
    assert html.startswith("<!doctype html>")
    assert "<title>SSR example - Foo</title>" in html
    assert "<h1>Foo</h1>" in html
    assert "<p>bar</p>" in html
    assert 'href="/public/a.css"' in html
    assert '<script defer src="/public/b.js"></script>' in html
    assert '<script defer src="/public/c.js"></script>' in html

    html = render_page("Foo", "")
    assert "<link" not in html and "<script" not in html


def test_iso_now():
    text = iso_now()
    assert text.endswith("Z")
    parsed = datetime.datetime.strptime(text, "%Y-%m-%dT%H:%M:%S.%fZ")
    now = datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None)
    assert abs((now - parsed).total_seconds()) < 60


def test_render_home():
    html = render_home()
    assert '<time id="time">' in html
    assert "/public/client.js" in html
    assert "/public/client.css" in html


def test_missing_page():
    assert "404" in MISSING_PAGE_HTML
    assert '<a href="/">' in MISSING_PAGE_HTML
    assert "<script" not in MISSING_PAGE_HTML


if __name__ == "__main__":
    from common import run_tests

    run_tests(globals())
