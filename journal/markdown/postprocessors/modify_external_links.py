from urllib.parse import urlparse

from bs4 import BeautifulSoup

from ..config import DEFAULT_CONFIG


def modify_external_links(html, context):
    """
    Add target="_blank" and rel="noopener noreferrer" to external links
    This runs AFTER sanitization
    """
    config = context.get("config", DEFAULT_CONFIG)
    if not config.external_links_new_tab:
        return html

    site_host = (context.get("site_host") or "").lower()
    soup = BeautifulSoup(html, "html.parser")

    for link in soup.find_all("a", href=True):
        href = link["href"]
        if not href.startswith(("http://", "https://")):
            continue

        host = (urlparse(href).hostname or "").lower()
        if site_host and host == site_host:
            continue

        link["target"] = "_blank"
        link["rel"] = "noopener noreferrer"

        classes = link.get("class") or []
        if "external-link" not in classes:
            link["class"] = [*classes, "external-link"]

    return str(soup)
