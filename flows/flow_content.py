"""
Content library: featured items, categories, search and item detail backed by
the CMS client. Lists are numbered so the user can reply with a number.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from state_io import Flow

from . import flow_coins
from .formatting import WHATSAPP_LIMITS, bold, italic, link
from .session import FlowSession, button, menu_button, parse_int

logger = logging.getLogger(__name__)

CONTENT_FALLBACK_URL = "https://cms.strove.ai/content/{slug}"
DEFAULT_CONTENT_COINS = 10
FEATURED_COUNT = 5
CATEGORY_ITEM_COUNT = 6
SEARCH_RESULT_COUNT = 6
MORE_COUNT = 10

CATEGORY_EMOJIS = {
    "workout": "💪",
    "recipes": "🍳",
    "mindfulness": "🧘",
    "nutrition": "🥗",
    "sleep": "😴",
    "fitness": "🏃",
    "wellness": "✨",
    "health": "❤️",
}

TYPE_ICONS = {"video": "🎬", "audio": "🎧", "podcast": "🎙️"}

TAG_RE = re.compile(r"<[^>]+>")


def get_category_emoji(slug: Optional[str]) -> str:
    return CATEGORY_EMOJIS.get(slug or "", "📄")


def get_content_type_icon(content_type: Optional[str]) -> str:
    return TYPE_ICONS.get(content_type or "", "📖")


def _count(value: Any) -> int:
    n = parse_int(value)
    return n if n is not None else 0


def engagement(item: Dict[str, Any]) -> int:
    return _count(item.get("viewCount")) + _count(item.get("likeCount"))


def _points(item: Dict[str, Any]) -> Optional[int]:
    points = item.get("points") or {}
    return parse_int(points.get("value")) if points.get("value") else None


def _content_nav_buttons(session: FlowSession, primary: bool = True) -> List[Dict[str, Any]]:
    return [
        button("📚 More Content", "menu_content", type="primary" if primary else None),
        menu_button(session),
    ]


def show_content_library(session: FlowSession) -> None:
    session.goto(Flow.CONTENT_LIBRARY, 0)
    session.say(
        f"📚 {bold('Content Library')}\n\n"
        "Explore workouts, recipes, and wellness content.\n\n"
        f"{italic('Loading content...')}"
    )
    session.clear_buttons()

    items = session.content.fetch_library()
    if not items:
        session.say("Unable to load content right now. Please try again later.")
        session.set_buttons(
            [
                button("🔄 Try again", "menu_content", type="primary"),
                menu_button(session),
            ]
        )
        return

    category_list = "\n".join(
        f"{get_category_emoji(cat.get('slug'))} {cat.get('name')}" for cat in session.content.categories[:6]
    )
    session.say(
        f"Found {bold(str(len(items)))} items\n\n"
        f"{bold('Categories:')}\n{category_list}\n\n"
        f"{italic('Choose below or type a category name:')}"
    )
    session.set_buttons(
        [
            button("⭐ Featured", "content_featured", type="primary"),
            button("📂 Browse all", "content_browse"),
            button("🔍 Search", "content_search"),
            menu_button(session),
        ]
    )


def show_featured_content(session: FlowSession) -> None:
    items = session.content.fetch_library()
    featured = sorted(items, key=engagement, reverse=True)[:FEATURED_COUNT]
    show_content_list(session, featured, "⭐ Featured Content")


def find_category(session: FlowSession, text: str) -> Optional[Dict[str, Any]]:
    lower = (text or "").strip().lower()
    if not lower:
        return None
    for cat in session.content.categories:
        if lower in ((cat.get("slug") or "").lower(), (cat.get("name") or "").lower()):
            return cat
    return None


def show_content_by_category(session: FlowSession, slug: str) -> None:
    items = session.content.fetch_library()
    filtered = [i for i in items if (i.get("category") or {}).get("slug") == slug]
    category = next((c for c in session.content.categories if c.get("slug") == slug), None)
    name = (category or {}).get("name") or slug
    show_content_list(session, filtered[:CATEGORY_ITEM_COUNT], f"{get_category_emoji(slug)} {name}")


def show_content_list(session: FlowSession, items: List[Dict[str, Any]], title: str) -> None:
    if not items:
        session.say(f"{title}\n\nNo content found.")
        session.set_buttons(
            [
                button("← Back", "menu_content"),
                menu_button(session),
            ]
        )
        return

    shown = items[: WHATSAPP_LIMITS["MAX_LIST_ITEMS"]]
    session.temp["content_items"] = shown

    lines = []
    for index, item in enumerate(shown, start=1):
        duration_label = (item.get("duration") or {}).get("label")
        duration = f" ({duration_label})" if duration_label else ""
        points = _points(item)
        points_text = f" 🪙{points}" if points else ""
        lines.append(
            f"{bold(str(index))}. {get_content_type_icon(item.get('type'))} {item.get('title')}{duration}{points_text}"
        )

    session.say(
        f"{bold(title)}\n\n" + "\n".join(lines) + f"\n\n{italic(f'Reply with a number (1-{len(shown)}) to open')}"
    )
    session.set_buttons(
        [
            button("🔄 More content", "content_more"),
            button("📂 Categories", "menu_content"),
            menu_button(session),
        ]
    )
    session.set_step(2)


def _item_by_id(session: FlowSession, document_id: Any) -> Optional[Dict[str, Any]]:
    for item in session.content.fetch_library():
        if item.get("documentId") == document_id:
            return item
    for item in session.temp.get("content_items", []):
        if item.get("documentId") == document_id:
            return item
    return None


def show_content_detail(session: FlowSession, document_id: Any) -> None:
    item = _item_by_id(session, document_id)
    if item is None:
        session.say("Content not found.")
        session.set_buttons(
            [
                button("← Back", "menu_content"),
                menu_button(session),
            ]
        )
        return
    open_content(session, item)


def resolve_media_url(item: Dict[str, Any], action_types: tuple) -> str:
    """Find the playable URL: body actions, then the actions list, then direct fields."""
    for block in item.get("body") or []:
        if isinstance(block, dict) and (block.get("action_url") or block.get("action_type") in action_types):
            if block.get("action_url"):
                return block["action_url"]
            break

    for action in item.get("actions") or []:
        if isinstance(action, dict):
            url = action.get("action_url") or action.get("url") or action.get("link")
            if url:
                return url

    media_key = "video" if "play-video" in action_types else "audio"
    for candidate in (
        item.get(f"{media_key}Url"),
        (item.get(media_key) or {}).get("url"),
        (item.get("media") or {}).get("url"),
        item.get("url"),
        item.get("externalUrl"),
    ):
        if candidate:
            return candidate

    return CONTENT_FALLBACK_URL.format(slug=item.get("slug") or "")


def _meta_line(item: Dict[str, Any]) -> str:
    category = (item.get("category") or {}).get("name") or ""
    duration_label = (item.get("duration") or {}).get("label")
    duration = f"⏱ {duration_label}" if duration_label else ""
    points = _points(item)
    points_text = f"🪙 {points} points" if points else ""
    return " • ".join(part for part in (category, duration, points_text) if part)


def open_content(session: FlowSession, item: Dict[str, Any]) -> None:
    session.say("Loading content...")
    full_item = session.content.fetch_detail(item.get("documentId")) if item.get("documentId") else None
    content = full_item or item

    if content.get("type") == "video":
        show_media_content(session, content, "🎬", "▶️ Watch Video", ("play-video",))
    elif content.get("type") in ("audio", "podcast"):
        show_media_content(session, content, "🎧", "🎧 Listen Now", ("play-audio", "play-podcast"))
    else:
        show_article_content(session, content)


def show_media_content(
    session: FlowSession,
    item: Dict[str, Any],
    icon: str,
    link_label: str,
    action_types: tuple,
) -> None:
    url = resolve_media_url(item, action_types)
    parts = [f"{icon} {bold(item.get('title') or '')}"]
    meta = _meta_line(item)
    if meta:
        parts.append(meta)
    if item.get("descriptionShort"):
        parts.append(item["descriptionShort"])
    parts.append(link(link_label, url))
    session.say("\n\n".join(parts))

    points = _points(item)
    complete_label = (
        f"✅ Complete & Earn {points} pts" if (item.get("points") or {}).get("earnable") and points else "✅ Mark Complete"
    )
    session.set_buttons(
        [
            button(complete_label, "content_complete", item.get("documentId"), type="primary"),
            button("❤️ Like", "content_like", item.get("documentId")),
            button("📚 More Content", "menu_content"),
            menu_button(session),
        ]
    )


def show_article_content(session: FlowSession, item: Dict[str, Any]) -> None:
    text = item.get("richText") or item.get("descriptionLong") or item.get("descriptionShort") or ""
    text = TAG_RE.sub("", text).strip()

    parts = [f"📖 {bold(item.get('title') or '')}"]
    category = (item.get("category") or {}).get("name")
    if category:
        parts.append(category)
    parts.append(text or italic("No content available for this article."))
    session.say("\n\n".join(parts))

    tags = [t.get("name") for t in item.get("tags") or [] if t.get("name")]
    if tags:
        session.say("🏷️ " + " • ".join(tags))

    session.set_buttons(
        [button("❤️ Like", "content_like", item.get("documentId"))] + _content_nav_buttons(session)
    )


def complete_content(session: FlowSession, document_id: Any) -> None:
    item = _item_by_id(session, document_id)
    if item is None:
        logger.warning(f"Cannot complete unknown content item {document_id!r}")
        return

    earned = _points(item) or DEFAULT_CONTENT_COINS
    milestone = flow_coins.award_coins(session, earned)

    message = (
        f"🎉 {bold('Nice work!')}\n\n"
        f"You completed \"{item.get('title')}\" and earned 🪙 {bold(str(earned))} points!"
    )
    if milestone:
        message += f"\n\n🏆 {bold('Milestone:')} {milestone}"
    session.say(message)
    session.set_buttons(_content_nav_buttons(session))


def like_content(session: FlowSession, document_id: Any) -> None:
    session.say("❤️ Liked! Thanks for the feedback.")
    session.set_buttons(_content_nav_buttons(session))


def start_search(session: FlowSession) -> None:
    session.goto(Flow.CONTENT_LIBRARY, 1)
    session.say("🔍 What would you like to find?\n\nType a keyword (e.g., 'yoga', 'breakfast', 'strength')")
    session.clear_buttons()


def matches_query(item: Dict[str, Any], query: str) -> bool:
    fields = [
        item.get("title") or "",
        item.get("descriptionShort") or "",
        (item.get("category") or {}).get("name") or "",
    ] + [t.get("name") or "" for t in item.get("tags") or []]
    return any(query in f.lower() for f in fields)


def search_content(session: FlowSession, query: str) -> None:
    lower = query.strip().lower()
    results = [i for i in session.content.fetch_library() if matches_query(i, lower)]
    show_content_list(session, results[:SEARCH_RESULT_COUNT], f'🔍 Results for "{query.strip()}"')


def show_all_categories(session: FlowSession) -> None:
    session.content.fetch_library()
    categories = session.content.categories
    category_list = "\n".join(
        f"{bold(str(i))}. {get_category_emoji(cat.get('slug'))} {cat.get('name')}"
        for i, cat in enumerate(categories, start=1)
    )
    session.goto(Flow.CONTENT_LIBRARY, 3)
    session.temp["browse_categories"] = [cat.get("slug") for cat in categories]
    session.say(
        f"📂 {bold('Browse Categories')}\n\n{category_list}\n\n"
        f"{italic('Reply with a number to browse that category')}"
    )
    session.set_buttons(
        [
            button("⭐ Featured", "content_featured", type="primary"),
            button("🔍 Search", "content_search"),
            menu_button(session),
        ]
    )


def show_more_content(session: FlowSession) -> None:
    items = list(session.content.fetch_library())
    session.rng.shuffle(items)
    show_content_list(session, items[:MORE_COUNT], "📚 More Content")


def handle_action(session: FlowSession, action: str, value: Any) -> None:
    if session.state.get("current_flow") != Flow.CONTENT_LIBRARY:
        session.goto(Flow.CONTENT_LIBRARY, 0)
    if action == "content_featured":
        show_featured_content(session)
    elif action == "content_category":
        show_content_by_category(session, value)
    elif action in ("content_view", "content_open"):
        show_content_detail(session, value)
    elif action == "content_complete":
        complete_content(session, value)
    elif action == "content_like":
        like_content(session, value)
    elif action == "content_search":
        start_search(session)
    elif action == "content_browse":
        show_all_categories(session)
    elif action == "content_more":
        show_more_content(session)
    else:
        show_content_library(session)


def handle_text(session: FlowSession, text: str) -> None:
    step = session.state.get("flow_step", 0)
    query = (text or "").strip()
    if not query:
        return

    if step == 0:
        category = find_category(session, query)
        if category is not None:
            show_content_by_category(session, category["slug"])
            return
    elif step == 2:
        number = parse_int(query)
        items = session.temp.get("content_items", [])
        if number is not None and 1 <= number <= len(items):
            open_content(session, items[number - 1])
            return
    elif step == 3:
        number = parse_int(query)
        slugs = session.temp.get("browse_categories", [])
        if number is not None and 1 <= number <= len(slugs):
            show_content_by_category(session, slugs[number - 1])
            return

    search_content(session, query)
