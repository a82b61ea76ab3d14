#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/richnote/constants.py
"""Constants shared across the richnote document core.

This module centralizes element type names, HTML tag tables, allow-lists,
MIME type tables and size limits used by the codecs, the sanitizer and the
ingestion dispatcher.
"""

from __future__ import annotations

from typing import Literal

# ---------------------------------------------------------------------------
# Sizes and limits
# ---------------------------------------------------------------------------

TITLE_MAX = 400
"""Maximum length of an extracted note title."""

CONTENT_MAX = 600_000
"""Maximum serialized length of a rich-text or Markdown note."""

WORD_LENGTH_MAX = 60
"""Maximum length of a normalized search word."""

MAX_IMAGE_BYTES = 200_000
"""Images larger than this are re-encoded (about a third of CONTENT_MAX)."""

MAX_IMAGE_DIMENSION = 1280
"""Images wider or taller than this are downscaled."""

DEFAULT_JPEG_QUALITY = 40

LINK_LABEL_MAX = 52
"""Maximum length of a label derived from a link URL."""

DEFAULT_MAX_NORMALIZATION_PASSES = 10_000

OBJECT_URL_SCHEME = "blob:"

DEFAULT_RICH_SUBTYPE = "html;hint=SEMANTIC"
DEFAULT_MARKDOWN_SUBTYPE = "markdown;hint=COMMONMARK"

TargetFormat = Literal["rich", "markdown", "plain"]
NoticeSeverity = Literal["info", "warning", "error"]

# ---------------------------------------------------------------------------
# Document tree vocabulary
# ---------------------------------------------------------------------------

MARK_NAMES: tuple[str, ...] = (
    "bold",
    "italic",
    "underline",
    "strikethrough",
    "code",
    "superscript",
    "subscript",
    "inserted",
    "deleted",
)

HEADING_TYPES = frozenset({"heading-one", "heading-two", "heading-three"})
LIST_TYPES: tuple[str, ...] = ("bulleted-list", "numbered-list", "task-list", "sequence-list")
CHECKLIST_TYPES = frozenset({"task-list", "sequence-list"})
INLINE_TYPES = frozenset({"link"})
VOID_TYPES = frozenset({"thematic-break", "image"})
TABLE_TYPES = frozenset({"table", "table-row", "table-cell"})

RETYPEABLE_AS_LIST_ITEM = frozenset({"paragraph", "quote", *HEADING_TYPES})
TEXT_BLOCK_TYPES = frozenset({"paragraph", "quote", "code", "thematic-break", *HEADING_TYPES})

# ---------------------------------------------------------------------------
# HTML deserialization tables
# ---------------------------------------------------------------------------

HEADING_TAG_TYPES: dict[str, str] = {
    "h1": "heading-one",
    "h2": "heading-two",
    "h3": "heading-three",
    "h4": "heading-three",
    "h5": "heading-three",
    "h6": "heading-three",
}

ELEMENT_TAG_TYPES: dict[str, str] = {
    "a": "link",
    "blockquote": "quote",
    **HEADING_TAG_TYPES,
    "hr": "thematic-break",
    "img": "image",
    "li": "list-item",
    "ol": "numbered-list",
    "ul": "bulleted-list",
    "p": "paragraph",
    "pre": "code",
    "table": "table",
    "tr": "table-row",
    "td": "table-cell",
    "th": "table-cell",
    "figcaption": "paragraph",
    "details": "paragraph",
    "dt": "paragraph",
    "dd": "quote",
}

TEXT_TAG_MARKS: dict[str, str] = {
    "code": "code",
    "kbd": "code",
    "samp": "code",
    "tt": "code",
    "del": "deleted",
    "ins": "inserted",
    "em": "italic",
    "i": "italic",
    "q": "italic",
    "dfn": "italic",
    "cite": "italic",
    "var": "italic",
    "abbr": "italic",
    "address": "italic",
    "figcaption": "italic",
    "sup": "superscript",
    "sub": "subscript",
    "s": "strikethrough",
    "strike": "strikethrough",
    "b": "bold",
    "strong": "bold",
    "dt": "bold",
    "th": "bold",
    "caption": "bold",
    "u": "underline",
}

SKIPPED_TAGS = frozenset({"script", "noscript", "style", "input", "button", "select", "nav"})

# Marks are emitted innermost first, so round-tripped markup is canonical.
MARK_SERIALIZATION_ORDER: tuple[tuple[str, str], ...] = (
    ("code", "code"),
    ("bold", "strong"),
    ("italic", "em"),
    ("superscript", "sup"),
    ("subscript", "sub"),
    ("underline", "u"),
    ("strikethrough", "s"),
    ("deleted", "del"),
    ("inserted", "ins"),
)

# ---------------------------------------------------------------------------
# Sanitizer allow-lists
# ---------------------------------------------------------------------------

SEMANTIC_TAGS: tuple[str, ...] = (
    "h1", "h2", "h3", "h4", "h5", "h6", "blockquote", "p", "ul", "ol",
    "header", "footer", "main", "section", "aside",
    "li", "dl", "dt", "dd", "b", "i", "strong", "em", "strike", "code", "hr", "br", "div",
    "table", "thead", "caption", "tbody", "tr", "th", "td", "pre",
    "img", "del", "ins", "kbd", "q", "samp", "sub", "sup", "var",
    "ruby", "rp", "rt",
    "article", "textarea",
)  # fmt: skip

SVG_TAGS: tuple[str, ...] = (
    "circle", "clipPath", "defs", "desc", "ellipse",
    "feBlend", "feColorMatrix", "feComponentTransfer", "feConvolveMatrix", "feDropShadow",
    "feGaussianBlur", "filter",
    "foreignObject", "g", "hatch", "hatchpath", "line", "linearGradient",
    "marker", "mask", "path", "pattern", "polygon", "polyline",
    "radialGradient", "rect", "stop", "svg", "symbol",
    "text", "textPath", "title", "tspan", "use", "view",
)  # fmt: skip

# Attribute names ending in "*" match any attribute with that prefix.
SANITIZER_ATTRIBUTES: dict[str, tuple[str, ...]] = {
    "a": ("href", "name", "target"),
    "img": ("src", "srcset", "alt"),
    "circle": ("cx", "cy", "r", "pathLength", "style"),
    "clipPath": ("id", "clipPathUnits", "style"),
    "ellipse": ("cx", "cy", "rx", "ry", "pathLength", "style"),
    "feBlend": ("in", "in2", "mode", "style"),
    "feColorMatrix": ("in", "type", "values", "style"),
    "feComponentTransfer": ("in", "style"),
    "feDropShadow": ("dx", "dy", "stdDeviation", "x", "y", "result", "flood-color", "flood-opacity"),
    "feConvolveMatrix": (
        "in", "order", "kernelMatrix", "divisor", "bias", "targetX", "targetY",
        "edgeMode", "kernelUnitLength", "preserveAlpha",
    ),
    "feGaussianBlur": ("in", "stdDeviation", "edgeMode"),
    "filter": ("x", "y", "filterRes", "filterUnits", "primitiveUnits"),
    "foreignObject": ("height", "x", "y", "style"),
    "g": ("pointer-events", "shape-rendering", "style"),
    "hatch": ("x", "y", "pitch", "rotate", "hatchUnits", "hatchContentUnits", "transform", "href", "style"),
    "hatchpath": ("d", "offset", "style"),
    "line": ("x1", "x2", "y1", "y2", "pathLength", "style"),
    "linearGradient": (
        "gradientUnits", "gradientTransform", "href", "spreadMethod", "x1", "x2", "y1", "y2", "style",
    ),
    "marker": ("marker*", "orient", "preserveAspectRatio", "refX", "refY", "viewBox", "style"),
    "mask": ("height", "maskContentUnits", "maskUnits", "x", "y", "style"),
    "path": ("d", "pathLength", "style"),
    "pattern": ("height", "href", "pattern*", "preserveAspectRatio", "viewBox", "x", "y", "style"),
    "polygon": ("points", "pathLength", "style"),
    "polyline": ("points", "pathLength", "style"),
    "radialGradient": ("cx", "cy", "fr", "fx", "fy", "gradient*", "href", "r", "spreadMethod", "style"),
    "rect": ("x", "y", "rx", "ry", "pathLength", "style"),
    "stop": ("offset", "stop-*", "style"),
    "svg": ("height", "preserveAspectRatio", "viewBox", "x", "y", "xmlns*", "style"),
    "symbol": ("height", "preserveAspectRatio", "refX", "refY", "viewBox", "x", "y", "style"),
    "text": ("x", "y", "dx", "dy", "rotate", "lengthAdjust", "text*", "style"),
    "textPath": (
        "href", "lengthAdjust", "method", "path", "side", "spacing", "startOffset", "text*", "style",
    ),
    "tspan": ("x", "y", "dx", "dy", "rotate", "lengthAdjust", "textLength", "style"),
    "use": ("href", "x", "y", "style"),
    "view": ("viewBox", "preserveAspectRatio", "zoomAndPan", "viewTarget"),
    "*": (
        "id", "tabindex", "clip*", "color*", "cursor", "display", "fill*", "height", "mask",
        "opacity", "overflow", "stroke*", "transform", "vector-effect", "visibility", "width", "xlink*",
    ),
}  # fmt: skip

SANITIZER_PROTOCOLS: tuple[str, ...] = ("http", "https", "data")

# Content of these tags is discarded along with the tag.
NON_TEXT_TAGS: tuple[str, ...] = ("style", "script", "noscript", "nav", "button", "select", "nl")

SANITIZER_TAG_RENAMES: dict[str, str] = {
    "h4": "h3",
    "h5": "h3",
    "h6": "h3",
    "i": "em",
    "b": "strong",
    "article": "div",
    "textarea": "div",
}

CSS_PROPERTIES: tuple[str, ...] = (
    "clip-path", "clip-rule", "color", "cursor", "display", "fill", "fill-opacity", "fill-rule",
    "font-family", "font-size", "font-style", "font-weight", "height", "mask", "opacity",
    "overflow", "stroke", "stroke-dasharray", "stroke-dashoffset", "stroke-linecap",
    "stroke-linejoin", "stroke-miterlimit", "stroke-opacity", "stroke-width", "text-anchor",
    "transform", "vector-effect", "visibility", "width",
)  # fmt: skip

# Title extraction buckets, by the element that encloses a text run.
TITLE_HEADING_TAGS: tuple[str, ...] = ("h1", "h2", "h3", "h4", "h5", "h6")
TITLE_HIGH_VALUE_TAGS = frozenset({"p", "blockquote", "section", "div", "li", "caption"})
TITLE_ORDINARY_TAGS = frozenset({"header", "footer", "main", "aside", "dl", "dt", "dd", "pre", "article", "textarea"})
TITLE_LOW_VALUE_TAGS = frozenset(
    {"em", "i", "strong", "b", "a", "table", "thead", "tbody", "tr", "th", "td", "ruby", "rp", "rt"}
)
TITLE_BUCKET_LIMIT = 2
LIST_ITEM_TITLE_PREFIX = "• "

# ---------------------------------------------------------------------------
# MIME types and files
# ---------------------------------------------------------------------------

HTML_LIKE_MIME_TYPES = frozenset(
    {"text/html", "application/xhtml+xml", "application/mathml+xml", "image/svg+xml", "text/xml"}
)

ALLOWED_NON_TEXT_MIME_TYPES = frozenset(
    {
        "application/mathml+xml", "application/xhtml+xml", "image/svg+xml",
        "application/yaml", "application/x-yaml", "application/json", "application/ld+json",
        "application/sql", "application/javascript", "application/x-javascript", "application/ecmascript",
        "message/rfc822", "message/global", "application/mbox",
        "application/x-shellscript", "application/x-sh", "application/x-csh", "application/x-tex",
        "application/x-troff", "application/x-info", "application/vnd.uri-map",
        "application/mathematica", "application/vnd.dart", "application/x-httpd-php",
    }
)  # fmt: skip

ALLOWED_EXTENSIONS = frozenset(
    {
        ".txt", ".text", ".readme", ".me", ".1st", ".plain", ".ascii", ".log",
        ".markdown", ".md", ".mkd", ".mkdn", ".mdown", ".adoc", ".textile", ".rst", ".etx", ".org",
        ".apt", ".pod", ".html", ".htm", ".xhtml", ".mml", ".mathml", ".msg", ".eml", ".mbox",
        ".tex", ".t", ".php", ".jsp", ".asp", ".mustache", ".hbs", ".erb", ".njk", ".ejs", ".haml",
        ".pug", ".webc", ".liquid", ".xo", ".json", ".yaml", ".yml", ".awk", ".vcs", ".ics", ".abc",
        ".js", ".ts", ".jsx", ".css", ".less", ".sass", ".glsl", ".webmanifest", ".m", ".java",
        ".properties", ".groovy", ".gvy", ".gy", ".gsh", ".el", ".sql", ".c", ".h", ".pch", ".cc",
        ".cxx", ".cpp", ".hpp", ".strings", ".p", ".py", ".rb", ".pm", ".dart", ".erl", ".hs",
        ".wat", ".asm", ".rcp", ".diff", ".make", ".mak", ".mk", ".nmk", ".cmake", ".snap", ".hbx",
        ".sh", ".bash", ".csh", ".bat", ".inf", ".ni", ".gradle", ".ldif", ".url", ".uri", ".uris",
        ".urim", ".urimap", ".meta", ".mtl", ".obj", ".gltf", ".service", ".toml",
    }
)  # fmt: skip

UNSUPPORTED_TEXT_SUBTYPES = frozenset({"rtf", "xml", "xml-external-parsed-entity", "SGML", "uuencode"})

# Image types a browser would decode but that are re-encoded before storage.
REENCODED_IMAGE_TYPES = frozenset(
    {"image/tiff", "image/jxl", "image/avif", "image/avci", "image/heif", "image/heic"}
)

# Subtype to file extension, where the extension is not simply the subtype,
# "x-<extension>" or "vnd.<extension>".
SUBTYPE_EXTENSIONS: dict[str, str] = {
    "xhtml+xml": ".xhtml",
    "mathml+xml": ".mml",
    "mathml-presentation+xml": ".mml",
    "mathml": ".mml",
    "plain": ".txt",
    "readme": ".txt",
    "me": ".txt",
    "1st": ".txt",
    "log": ".txt",
    "vnd.ascii-art": ".txt",
    "ascii": ".txt",
    "markdown": ".md",
    "mkd": ".md",
    "mkdn": ".md",
    "mdown": ".md",
    "yml": ".yaml",
    "vcard": ".vcf",
    "calendar": ".ics",
    "rfc822": ".eml",
    "global": ".u8msg",
    "x-uuencode": ".uue",
    "tab-separated-values": ".tsv",
    "x-shellscript": ".sh",
    "javascript": ".js",
    "x-javascript": ".js",
    "ecmascript": ".js",
    "x-python-script": ".py",
    "elisp": ".el",
    "gvy": ".groovy",
    "gy": ".groovy",
    "gsh": ".groovy",
    "make": ".nmk",
    "mak": ".nmk",
    "mk": ".nmk",
    "x-troff": ".t",
    "x-httpd-php": ".php",
    "uri-list": ".uri",
    "vnd.uri-map": ".urim",
    "vnd.dvb.subtitle": ".sub",
    "mathematica": ".nb",
}

PASTE_FAILURE_MESSAGE = "Can you open that in another app and copy?"
NOT_IMPORTABLE_MESSAGE = "Not importable. Open in appropriate app & copy."

# ---------------------------------------------------------------------------
# Third-party dependencies, as (install name, import name, version spec)
# ---------------------------------------------------------------------------

DEPS_HTML = [("beautifulsoup4", "bs4", ">=4.12.0")]
DEPS_SANITIZER = [("bleach", "bleach", ">=6.0.0"), ("tinycss2", "tinycss2", ""), ("beautifulsoup4", "bs4", "")]
DEPS_MARKDOWN = [("mistune", "mistune", ">=3.0.0")]
DEPS_IMAGES = [("Pillow", "PIL", ">=10.0.0")]

# ---------------------------------------------------------------------------
# Option defaults
# ---------------------------------------------------------------------------

DEFAULT_HTML_PARSER = "html.parser"
DEFAULT_NORMALIZE_ON_PARSE = True
DEFAULT_MARKDOWN_PLUGINS: tuple[str, ...] = ("strikethrough", "table", "task_lists")
DEFAULT_SUPERSCRIPT_REPLACEMENTS = True
DEFAULT_THEMATIC_BREAK = "-" * 30
DEFAULT_LIST_INDENT = 4
SVG_PASSTHROUGH_FACTOR = 1.4
SVG_FULL_WIDTH_MIN_PX = 320
EXPORT_NAME_MAX = 90
DEFAULT_EXPORT_NAME = "note"
