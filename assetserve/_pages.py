"""
HTML generators for the server-rendered pages.
"""

import datetime


def render_page(title, content, styles=(), scripts=()):
    """ Render a complete HTML document. The styles and scripts are keys
    of assets in the public directory.
    """
    links = "".join(
        f'<link rel="stylesheet" media="screen" href="/public/{x}" crossorigin="anonymous">'
        for x in styles
    )
    script_tags = "".join(f'<script defer src="/public/{x}"></script>' for x in scripts)
    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <title>SSR example - {title}</title>
  {links}
  {script_tags}
</head>
<body>
  <h1>{title}</h1>

  {content}
</body>
</html>
"""


def iso_now():
    """ Get the current UTC time in ISO 8601 form, with millisecond
    precision and a "Z" suffix.
    """
    now = datetime.datetime.now(datetime.timezone.utc)
    return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"


def render_home():
    """ Render the home page. The current time is rendered in, but the
    client script keeps the clock up to date from there.
    """
    return render_page(
        "Current time",
        f'<time id="time">{iso_now()}</time>',
        styles=["client.css"],
        scripts=["client.js"],
    )


# This page does not change, so we pre-render it
MISSING_PAGE_HTML = render_page(
    "404: Page not found",
    "<p>There is no page at this address. You can go back to the "
    '<a href="/">main page</a> from here, though.</p>',
    styles=["client.css"],
)
