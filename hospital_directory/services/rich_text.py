import html
import logging
from typing import Any, List

logger = logging.getLogger(__name__)

HTML_TEMPLATES = {
    "PARAGRAPH": "<p>{}</p>",
    "HEADING_ONE": "<h1>{}</h1>",
    "HEADING_TWO": "<h2>{}</h2>",
    "HEADING_THREE": "<h3>{}</h3>",
}

LIST_TAGS = {
    "BULLETED_LIST": "ul",
    "ORDERED_LIST": "ol",
}


def _fallback(content: Any) -> str:
    return str(content).strip()


def _unwrap(content: Any) -> Any:
    """Rich documents are sometimes nested under a ``data`` key."""
    if isinstance(content, dict) and "nodes" not in content and isinstance(content.get("data"), dict):
        return content["data"]
    return content


def _node_text(node: Any) -> str:
    """Concatenate inline text of ``node`` and all its descendants."""
    if not isinstance(node, dict):
        return ""
    text_data = node.get("textData")
    own = ""
    if isinstance(text_data, dict) and text_data.get("text"):
        own = str(text_data["text"])
    elif node.get("text"):
        own = str(node["text"])
    children = node.get("nodes")
    if isinstance(children, list) and children:
        return own + "".join(_node_text(child) for child in children)
    return own


def _blocks(content: Any) -> List[dict]:
    if isinstance(content, list):
        return content
    nodes = content.get("nodes") if isinstance(content, dict) else None
    if not isinstance(nodes, list):
        raise ValueError(f"Not a rich text document: {type(content).__name__}")
    return nodes


def to_plain_text(content: Any) -> str:
    """Flatten a rich text document to newline-separated plain text."""
    if not content:
        return ""
    if isinstance(content, str):
        return content.strip()

    content = _unwrap(content)
    try:
        lines = [_node_text(block) for block in _blocks(content)]
        return "\n".join(line for line in lines if line).strip()
    except Exception as e:
        logger.warning(f"⚠️ Rich text parse failed, using string fallback: {e}")
        return _fallback(content)


def _list_items_html(block: dict) -> str:
    items = block.get("nodes") or []
    return "".join(f"<li>{html.escape(_node_text(item))}</li>" for item in items)


def to_html(content: Any) -> str:
    """Render a rich text document to simple HTML."""
    if not content:
        return ""
    if isinstance(content, str):
        return content.strip()

    content = _unwrap(content)
    try:
        parts = []
        for block in _blocks(content):
            block_type = block.get("type") if isinstance(block, dict) else None
            if block_type in LIST_TAGS:
                tag = LIST_TAGS[block_type]
                parts.append(f"<{tag}>{_list_items_html(block)}</{tag}>")
                continue
            text = html.escape(_node_text(block))
            template = HTML_TEMPLATES.get(block_type)
            if template:
                parts.append(template.format(text))
            elif text:
                parts.append(f"<p>{text}</p>")
        rendered = "".join(parts)
        if rendered:
            return rendered
        plain = to_plain_text(content)
        return f"<p>{html.escape(plain)}</p>" if plain else ""
    except Exception as e:
        logger.warning(f"⚠️ Rich text HTML render failed, using string fallback: {e}")
        return _fallback(content)
