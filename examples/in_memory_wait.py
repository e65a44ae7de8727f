"""
Waiting on a document that changes in the background.

This example shows:
- chains that are described before the element exists
- `should(...)` polling until a background thread renders the menu
- `hidden` succeeding once the spinner is gone
- a timeout carrying the last failure and the attempt history
"""

import logging
import threading
import time

from eventually import Configuration, Session, WaitTimeoutError, hidden, text, texts_in_any_order
from eventually.backends import InMemoryDocument, node


def render_later(doc: InMemoryDocument) -> None:
    time.sleep(0.5)
    doc.append(
        node(
            "ul",
            "",
            node("li", "Themes"),
            node("li", "Resources"),
            node("li", "Templates"),
            node("li", "v8"),
            id="menu",
        )
    )
    doc.remove(doc.find_all("#spinner")[0])


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)

    doc = InMemoryDocument(node("div", "Loading...", id="spinner"))
    session = Session(doc, config=Configuration(timeout_s=2.0, poll_s=0.1), capture_artifacts=False)

    threading.Thread(target=render_later, args=(doc,), daemon=True).start()

    menu = session.element("#menu")
    menu.find("li", 2).should(text("templates"))
    menu.all("li").should(texts_in_any_order("He", "ate", "8", "PLATES"))
    session.element("#spinner").should(hidden)
    print("menu items:", menu.all("li").texts())

    try:
        menu.find("li", 9).should(text("Blog"), timeout_s=0.3)
    except WaitTimeoutError as e:
        print("timed out:", e)
        print("last cause:", repr(e.cause))
        print("attempts:", e.attempts)


if __name__ == "__main__":
    main()
