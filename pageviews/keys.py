import re
from urllib.parse import unquote

_SEPARATORS = re.compile(r"[/.]")


def sanitize_key(raw_url: str) -> str:
    """Turn a URL into a storage key: percent-decode, then map '/' and '.' to '_'.

    "example.com/blog/post.html" -> "example_com_blog_post_html"
    """
    return _SEPARATORS.sub("_", unquote(raw_url))
