"""Guide tab."""

from __future__ import annotations

from textual.containers import Container
from textual.widgets import Static

GUIDE_TEXT = """\
Area codes
  Add a 3-digit area code and choose whether to block calls, texts, or both.
  Calls from a blocked area code are blocked for all ten million numbers in it.

Blocked numbers
  Texts from an area code with texts blocked are filed as junk and the sender
  is recorded here. Numbers you block by hand also block calls.

Applying changes
  Run `areablock export` to rebuild the call-blocking list.
  The message filter picks up changes within its cache TTL (60s by default).
"""


class GuideTab(Container):
    def compose(self):
        yield Static(GUIDE_TEXT, classes="guide")
