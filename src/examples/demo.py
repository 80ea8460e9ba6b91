#!/usr/bin/env python
"""
demo.py – One-shot showcase of dynview view models.

1. Builds a view model tree from JSON and listens for changes.
2. Merges an update into it (nested observers survive).
3. Mirrors a plain Python model and shows derived-property notifications.
"""

from dynview import DynamicViewModel, ModelViewModel, on, parse, setup_logging

setup_logging("DEBUG")


def show(source, name: str) -> None:
    print(f"  ↳ {type(source).__name__} changed: {name}")


# ────────────────────────────────── 1. JSON → view model ─────────────────────────────
class Story(DynamicViewModel):
    title: str = ""
    words: int = 0


story = parse(
    '{"title": "Draft", "words": "120", "author": {"name": "Ada"}, "tags": ["a", "b"]}',
    Story,
)
story.property_changed.connect(show)
story.author.property_changed.connect(show)

print(f"\n→ Parsed {story!r}")
story.title = "Final title"
story.words = 130
story["title"] = "Final title"  # indexer always notifies "[title]"


# ────────────────────────────────── 2. merge ──────────────────────────────────────────
update = parse('{"author": {"name": "Ada Lovelace", "born": 1815}, "status": "done"}')
story.merge_from(update)
print(f"\n→ After merge: {story.to_json(indent=2)}")


# ────────────────────────────────── 3. class-level hooks ─────────────────────────────
@on.change(Story)
def audit(instance, name: str) -> None:
    print(f"  [audit] {name} = {instance.get(name)!r}")


story.words = 200


# ────────────────────────────────── 4. mirror a plain model ──────────────────────────
class Person:
    first_name: str
    last_name: str

    def __init__(self, first_name: str, last_name: str):
        self.first_name = first_name
        self.last_name = last_name

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def marry(self, last_name: str) -> None:
        self.last_name = last_name


person = ModelViewModel(Person("Jane", "Doe"))
person.property_changed.connect(show)

print(f"\n→ Mirroring {person.full_name}")
person.first_name = "Janet"
person.marry("Smith")
print(f"→ Now {person.full_name}\n")
