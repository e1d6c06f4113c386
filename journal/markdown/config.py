"""
Renderer configuration.

Everything the Markdown pipeline needs to know (Pandoc arguments, the
sanitizer allow-list, embed defaults) lives on an immutable ``RenderConfig``
that is passed into each render call.
"""

from dataclasses import dataclass, field, replace

PANDOC_FROM = (
    "markdown"
    "+autolink_bare_uris"
    "+strikeout"
    "+task_lists"
    "+pipe_tables"
    "+footnotes"
    "+fenced_code_blocks"
    "+fenced_code_attributes"
    "+backtick_code_blocks"
    "+raw_html"
    "+auto_identifiers"
    "+hard_line_breaks"
)

ALLOWED_TAGS = frozenset(
    {
        # headings
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        # text
        "p",
        "br",
        "div",
        "span",
        "strong",
        "b",
        "em",
        "i",
        "u",
        "s",
        "strike",
        "del",
        # lists
        "ul",
        "ol",
        "li",
        # links and media
        "a",
        "img",
        "figure",
        "figcaption",
        "iframe",
        # blocks
        "blockquote",
        "pre",
        "code",
        # tables
        "table",
        "thead",
        "tbody",
        "tr",
        "th",
        "td",
    }
)

ALLOWED_ATTRIBUTES = frozenset(
    {
        "href",
        "src",
        "alt",
        "title",
        "class",
        "id",
        "width",
        "height",
        "target",
        "rel",
        # iframe embeds
        "frameborder",
        "allow",
        "allowfullscreen",
    }
)

ALLOWED_PROTOCOLS = frozenset({"http", "https", "mailto", "tel"})


@dataclass(frozen=True)
class EmbedDefaults:
    youtube_width: int = 560
    youtube_height: int = 315
    drive_width: int = 640
    drive_height: int = 480


@dataclass(frozen=True)
class RenderConfig:
    """Immutable settings for one rendering pass."""

    pandoc_from: str = PANDOC_FROM
    pandoc_to: str = "html5"
    pandoc_extra_args: tuple = ("--wrap=none",)
    allowed_tags: frozenset = ALLOWED_TAGS
    allowed_attributes: frozenset = ALLOWED_ATTRIBUTES
    allow_data_attributes: bool = True
    allowed_protocols: frozenset = ALLOWED_PROTOCOLS
    embeds: EmbedDefaults = field(default_factory=EmbedDefaults)
    external_links_new_tab: bool = True

    def without_tags(self, *tags: str) -> "RenderConfig":
        """Return a copy whose allow-list excludes ``tags``."""
        return replace(self, allowed_tags=self.allowed_tags.difference(tags))


DEFAULT_CONFIG = RenderConfig()

# Authored HTML articles may not smuggle in their own iframes
AUTHORED_HTML_CONFIG = DEFAULT_CONFIG.without_tags("iframe")
