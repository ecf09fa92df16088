"""
Emoji Provider - Pick an emoji by name and copy it to the clipboard.

Triggers on a ":" prefix only, so emoji never crowd ordinary queries:
  :        → the whole table, in table order
  :heart   → emoji whose name contains "heart"
"""

from typing import Iterator

from omnibar.search.cancellation import CancellationToken
from omnibar.search.models import Category, CopyToClipboard, Result
from omnibar.search.provider import Provider
from omnibar.search.scoring import relevance

PREFIX = ":"
BROWSE_SCORE = 0.5

# (character, name, group)
EMOJI_TABLE: list[tuple[str, str, str]] = [
    ("😀", "Grinning Face", "Smileys"),
    ("😂", "Face with Tears of Joy", "Smileys"),
    ("😊", "Smiling Face with Smiling Eyes", "Smileys"),
    ("😉", "Winking Face", "Smileys"),
    ("😍", "Smiling Face with Heart-Eyes", "Smileys"),
    ("🤔", "Thinking Face", "Smileys"),
    ("🙄", "Face with Rolling Eyes", "Smileys"),
    ("😴", "Sleeping Face", "Smileys"),
    ("🐶", "Dog Face", "Animals"),
    ("🐱", "Cat Face", "Animals"),
    ("🦊", "Fox", "Animals"),
    ("🐼", "Panda", "Animals"),
    ("🐧", "Penguin", "Animals"),
    ("🦉", "Owl", "Animals"),
    ("🍎", "Red Apple", "Food"),
    ("🍌", "Banana", "Food"),
    ("🥑", "Avocado", "Food"),
    ("🧀", "Cheese", "Food"),
    ("🍕", "Pizza", "Food"),
    ("🌮", "Taco", "Food"),
    ("⚽", "Soccer Ball", "Activities"),
    ("🏓", "Ping Pong", "Activities"),
    ("⛷", "Skier", "Activities"),
    ("📱", "Mobile Phone", "Objects"),
    ("💻", "Laptop", "Objects"),
    ("⌨️", "Keyboard", "Objects"),
    ("📸", "Camera with Flash", "Objects"),
    ("☎️", "Telephone", "Objects"),
    ("❤️", "Red Heart", "Symbols"),
    ("💙", "Blue Heart", "Symbols"),
    ("💘", "Heart with Arrow", "Symbols"),
    ("☮️", "Peace Symbol", "Symbols"),
    ("✅", "Check Mark Button", "Symbols"),
]


class EmojiProvider(Provider):
    """Search a fixed emoji table by name."""

    name = "emoji"

    def __init__(self, table: list[tuple[str, str, str]] | None = None, max_results: int = 30):
        self.table = table if table is not None else EMOJI_TABLE
        self.max_results = max_results

    def search(self, query: str, cancel: CancellationToken) -> Iterator[Result]:
        q = query.strip()
        if not q.startswith(PREFIX):
            return
        term = q[len(PREFIX):].strip().lower()

        count = 0
        for char, name, group in self.table:
            if cancel.cancelled or count >= self.max_results:
                return
            if term and term not in name.lower():
                continue
            count += 1
            yield Result(
                id=f"emoji_{name.lower().replace(' ', '_')}",
                title=f"{char}  {name}",
                subtitle=f"{group} • Press Enter to copy",
                icon=char,
                category=Category.EMOJI,
                action=CopyToClipboard(char),
                relevance_score=relevance(name, term) if term else BROWSE_SCORE,
            )
