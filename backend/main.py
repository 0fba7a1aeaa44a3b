"""
main.py
--------
Taipei Explorer terminal browser.

Run:
  python main.py                         browse + chat, no location
  python main.py --lat 25.03 --lng 121.56  chat with maps grounding near you
  python main.py --replay <session_id>   print a recorded session journal

Environment: see config.py (GEMINI_API_KEY, USE_STUB_ATTRACTIONS, ...).
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

import config
from modules.assistant.chat_client import AssistantChatClient
from modules.assistant.travel_summary import TravelSummaryClient
from modules.observability.logger import default_logger
from modules.session.browse_state import BrowseSession
from modules.session.chat_session import ChatSession
from modules.tool_usage.attraction_tool import AttractionRepository
from schemas import Attraction, ChatMessage, GeoPosition


def _print_help() -> None:
    print("\n  ── Commands ───────────────────────────────────────────")
    print("    search <text>        filter by name / introduction (empty clears)")
    print(f"    category <label>     one of: {' '.join(config.CATEGORIES)}")
    print("    list                 show matching attractions")
    print("    show <id>            attraction detail + AI travel tip")
    print("    ask <question>       chat with the AI travel assistant")
    print("    refresh              fetch the dataset again")
    print("    help                 this list")
    print("    quit / q             exit")
    print()


def _print_list(browse: BrowseSession) -> None:
    if browse.error is not None:
        print(f"  喔不！發生了一些錯誤：{browse.error}")
        print("  Type 'refresh' to try again.")
        return
    items = browse.visible()
    print(f"  共 {len(items)} 個景點  "
          f"(search={browse.criteria.search_text!r}, category={browse.criteria.category})")
    if not items:
        print("  找不到相關景點，嘗試更換關鍵字或選擇其他分類看看吧！")
        return
    for a in items:
        print(f"  [{a.id:>5}] {a.name}  〔{a.primary_category}〕")


def _print_detail(a: Attraction, browse: BrowseSession) -> None:
    print(f"\n  ── {a.name} ──")
    print(f"    分類：{a.primary_category}")
    print(f"    地址：{a.address}")
    if a.open_time:
        print(f"    開放時間：{a.open_time}")
    if a.tel:
        print(f"    電話：{a.tel}")
    if a.official_site:
        print(f"    官方網站：{a.official_site}")
    print(f"    地圖導航：{a.map_search_url}")
    print(f"    圖片：{a.cover_image}")
    print(f"\n    {a.teaser}")
    print(f"\n  ✦ AI 隨身導遊建議\n    {browse.summary_text}\n")


def _print_reply(message: ChatMessage) -> None:
    print(f"  AI：{message.content}")
    for url in message.grounding_urls:
        print(f"    ↳ {url.title}  {url.uri}")


def dispatch(raw: str, browse: BrowseSession, chat: ChatSession) -> bool:
    """Execute one command line. Returns False when the user wants to quit."""
    raw = raw.strip()
    if not raw:
        return True
    cmd, _, arg = raw.partition(" ")
    cmd = cmd.lower()
    arg = arg.strip()

    if cmd in ("quit", "q", "exit"):
        return False

    if cmd == "help":
        _print_help()
    elif cmd == "search":
        browse.set_search_text(arg)
        _print_list(browse)
    elif cmd == "category":
        browse.set_category(arg or config.ALL_CATEGORY)
        _print_list(browse)
    elif cmd == "list":
        _print_list(browse)
    elif cmd == "refresh":
        print("  正在探索台北的美麗角落...")
        browse.refresh()
        _print_list(browse)
    elif cmd == "show":
        try:
            attraction = browse.find(int(arg))
        except ValueError:
            print("  Usage: show <id>   (integer id)")
            return True
        if attraction is None:
            print(f"  No attraction with id {arg}.")
            return True
        request = browse.open_detail(attraction)
        browse.load_summary(request)
        _print_detail(attraction, browse)
        browse.close_detail()
    elif cmd == "ask":
        reply = chat.send(arg)
        if reply is None:
            print("  Usage: ask <question>")
        else:
            _print_reply(reply)
    else:
        print(f"  Unknown command {cmd!r}. Type 'help'.")
    return True


def _arg_value(flag: str) -> Optional[str]:
    if flag not in sys.argv:
        return None
    idx = sys.argv.index(flag)
    return sys.argv[idx + 1] if idx + 1 < len(sys.argv) else None


def _location_from_argv() -> Optional[GeoPosition]:
    lat, lng = _arg_value("--lat"), _arg_value("--lng")
    if lat is None or lng is None:
        return None
    try:
        return GeoPosition(lat=float(lat), lng=float(lng))
    except ValueError:
        print("  Ignoring invalid --lat/--lng; maps grounding disabled.")
        return None


def run() -> None:
    journal = default_logger()
    browse = BrowseSession(AttractionRepository(), TravelSummaryClient(), journal=journal)
    chat = ChatSession(AssistantChatClient(), location=_location_from_argv(), journal=journal)

    print("\n  台北景點隨手查 · Taipei Explorer")
    print("  正在探索台北的美麗角落...")
    browse.refresh()
    _print_list(browse)
    print(f"\n  AI：{chat.messages[0].content}")
    _print_help()

    while True:
        try:
            raw = input("  taipei> ")
        except (EOFError, KeyboardInterrupt):
            break
        if not dispatch(raw, browse, chat):
            break

    if journal is not None:
        journal.close()
        print(f"  Sessions logged as {browse.session_id} / {chat.session_id}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if "--replay" in sys.argv:
        from modules.observability.replay import replay_session
        _replay_sid = _arg_value("--replay")
        if _replay_sid is None:
            print("Usage: python main.py --replay <session_id>")
            sys.exit(1)
        for line in replay_session(_replay_sid):
            print(line)
        sys.exit(0)

    run()
