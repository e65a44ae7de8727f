"""
Polling a real page through Playwright.

Failure artifacts (screenshot, page source, manifest.json) are written under
EVENTUALLY_REPORTS_DIR (default .eventually/artifacts) when a wait fails.
"""

from playwright.sync_api import sync_playwright

from eventually import Session, WaitTimeoutError, attribute, text, visible
from eventually.backends import PlaywrightContext


def main() -> None:
    with sync_playwright() as p:
        browser = p.chromium.launch(headless=True)
        page = browser.new_page()
        page.goto("https://example.com")

        session = Session(PlaywrightContext(page))
        session.element("h1").should(visible, text("example domain"))
        session.element("a").should(attribute("href"))

        try:
            session.element("#does-not-exist").should(visible, timeout_s=1.0)
        except WaitTimeoutError as e:
            print("timed out:", e)
            if e.artifacts is not None:
                print("artifacts:", e.artifacts.run_dir)

        browser.close()


if __name__ == "__main__":
    main()
